"""Value types for IPv4 and IPv6 addresses and CIDR blocks.

This package is used to create, compare, navigate and subnet IPv4 and
IPv6 addresses and CIDR blocks.  Each address family lives in its own
module, cidrblock.ipv4 and cidrblock.ipv6, with the same API:

    >>> from cidrblock import ipv4, ipv6
    >>> net = ipv4.cidr('192.168.0.0/24')
    >>> net.address_count()
    256
    >>> str(net.get_last_usable_address())
    '192.168.0.254'
    >>> ipv6.is_valid_address('2001:db8:::1')
    False
"""

import logging

from cidrblock import ipv4, ipv6
from cidrblock._base import AddressValueError, CidrRangeError, CidrValueError
from cidrblock.ipv4 import (Ipv4Address, Ipv4AddressValueError, Ipv4Cidr,
                            Ipv4CidrRangeError, Ipv4CidrValueError)
from cidrblock.ipv6 import (Ipv6Address, Ipv6AddressValueError, Ipv6Cidr,
                            Ipv6CidrRangeError, Ipv6CidrValueError)

__version__ = '0.1.0'

__all__ = [
    'AddressValueError', 'CidrRangeError', 'CidrValueError',
    'Ipv4Address', 'Ipv4AddressValueError', 'Ipv4Cidr',
    'Ipv4CidrRangeError', 'Ipv4CidrValueError',
    'Ipv6Address', 'Ipv6AddressValueError', 'Ipv6Cidr',
    'Ipv6CidrRangeError', 'Ipv6CidrValueError',
    'ip_address', 'ip_cidr', 'ipv4', 'ipv6',
]

logging.getLogger(__name__).addHandler(logging.NullHandler())

# =============================================================================
# Factory functions
# =============================================================================

def ip_address(address):
    """Take an address literal and return an object of the correct type.

    Args:
        address: A string, integer, or sequence of groups.  Either IPv4
            or IPv6 addresses may be supplied; integers less than 2**32
            will be considered to be IPv4.

    Returns:
        An Ipv4Address or Ipv6Address object.

    Raises:
        AddressValueError: if address is not a v4 or a v6 address
    """
    try:
        return Ipv4Address(address)
    except Ipv4AddressValueError:
        pass
    try:
        return Ipv6Address(address)
    except Ipv6AddressValueError:
        pass
    raise AddressValueError(address)

def ip_cidr(cidr):
    """Take a CIDR literal and return an object of the correct type.

    Args:
        cidr: A string 'address/prefix', a dict with 'address' and
            'range' keys, or an (address, range) tuple.  As for
            ip_address, an integer address below 2**32 is IPv4.

    Returns:
        An Ipv4Cidr or Ipv6Cidr object.

    Raises:
        CidrValueError: if cidr is not a v4 or a v6 CIDR block
    """
    try:
        return Ipv4Cidr(cidr)
    except Ipv4CidrValueError:
        pass
    try:
        return Ipv6Cidr(cidr)
    except Ipv6CidrValueError:
        pass
    raise CidrValueError(cidr)
