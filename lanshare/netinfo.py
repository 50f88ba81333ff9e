import ipaddress
import socket

import psutil

from .models import ConfigError


def lan_addresses():
    """Non-loopback IPv4 addresses of every network interface, in interface order"""
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise ConfigError(f"Error getting network interfaces: {e}")

    found = []
    for addrs in interfaces.values():
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(addr.address).is_loopback or addr.address in found:
                continue
            found.append(addr.address)
    return found
