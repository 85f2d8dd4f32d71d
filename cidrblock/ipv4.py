"""IPv4 addresses and CIDR blocks.

An IPv4 address may be given as a dotted decimal string "a.b.c.d", an
integer in the range 0 to 2**32 - 1, or a list/tuple of four octets.
A CIDR block may be given as a string "a.b.c.d/p", a dict
{'address': ..., 'range': p} or an (address, p) tuple.

    >>> from cidrblock import ipv4
    >>> ipv4.address('192.168.1.1').to_number()
    3232235777
    >>> [str(net) for net in ipv4.cidr('192.168.0.0/24').subnet(26)]
    ['192.168.0.0/26', '192.168.0.64/26', '192.168.0.128/26', '192.168.0.192/26']
"""

from cidrblock._base import (AddressValueError, CidrRangeError,
                             CidrValueError, _BaseAddress, _BaseCidr,
                             isdecdigit)

# =============================================================================
# Module specific constants
# =============================================================================

# The maximum and minimum integer values of an IPv4 address
MAX_SIZE = 2**32 - 1
MIN_SIZE = 0

# The maximum and minimum CIDR prefix lengths
MAX_RANGE = 32
MIN_RANGE = 0

# =============================================================================
# Module specific exceptions
# =============================================================================

class Ipv4AddressValueError(AddressValueError):
    """An IPv4 address literal failed validation."""

    _family = 'IPv4'

class Ipv4CidrValueError(CidrValueError):
    """An IPv4 CIDR literal failed validation."""

    _family = 'IPv4'

class Ipv4CidrRangeError(CidrRangeError):
    """An IPv4 prefix length is out of bounds for subnetting."""

# =============================================================================
# Factory and validation functions
# =============================================================================

def address(ip):
    """Create an IPv4 address from an address literal.

    Args:
        ip: A dotted decimal string, an integer or four octets.

    Returns:
        An Ipv4Address object.

    Raises:
        Ipv4AddressValueError: if ip is not a valid IPv4 address.
    """
    return Ipv4Address(ip)

def cidr(cidr):
    """Create an IPv4 CIDR block from a CIDR literal.

    Args:
        cidr: A string 'a.b.c.d/p', a dict with 'address' and 'range'
            keys, or an (address, range) tuple.

    Returns:
        An Ipv4Cidr object.

    Raises:
        Ipv4CidrValueError: if cidr is not a valid IPv4 CIDR.
    """
    return Ipv4Cidr(cidr)

def is_valid_address(ip):
    """Test if ip is a valid IPv4 address literal; never raises."""
    try:
        Ipv4Address.parse(ip)
    except Ipv4AddressValueError:
        return False
    return True

def is_valid_cidr(cidr):
    """Test if cidr is a valid IPv4 CIDR literal; never raises.

    Note that only the leading integer of a string prefix is used, so
    '192.168.0.0/24.5' is valid, with a prefix length of 24.
    """
    try:
        Ipv4Cidr.parse(cidr)
    except Ipv4CidrValueError:
        return False
    return True

def parse_octets(ip):
    """Convert an IPv4 address literal to a list of four octets.

    Example:
        >>> parse_octets(3232235777)
        [192, 168, 1, 1]

    Raises:
        Ipv4AddressValueError: if ip is not a valid IPv4 address.
    """
    return Ipv4Address(ip).octets()

def is_private_rfc1918(ip):
    """Test if an address is in the RFC 1918 private address space.

    Args:
        ip: An Ipv4Address, or IPv4 address literal.

    Returns:
        True if ip is in 10.0.0.0/8, 172.16.0.0/12 or 192.168.0.0/16.

    Raises:
        Ipv4AddressValueError: if ip is not a valid IPv4 address.
    """
    for net in _Ipv4Constants._private_nets:
        if net.includes(ip):
            return True
    return False

# =============================================================================
# IPv4 classes
# =============================================================================

class _BaseIpv4:
    """A base class mix-in for IPv4 classes."""

    __slots__ = ()

    _version = 4
    _max_address = MAX_SIZE
    _address_len = MAX_RANGE

    @property
    def exploded(self):
        """The fully expanded string representation of this object"""
        return self.__str__()

class Ipv4Address(_BaseAddress, _BaseIpv4):
    """An IPv4 Address."""

    __slots__ = ('_ip',)

    _group_bits = 8
    _group_count = 4
    _separator = '.'
    _error = Ipv4AddressValueError

    @staticmethod
    def from_string(txt):
        """Convert an IPv4 address string to an integer.

        The string format is "a.b.c.d", where a, b, c and d are decimal
        integers in the range 0 to 255, inclusive, of 1 to 3 digits.
        Leading zeros are permitted; spaces are not.

        Args:
            txt: An IPv4 address string

        Returns:
            The IPv4 address as an integer

        Raises:
            Ipv4AddressValueError if the string is not a valid IPv4 address.
        """
        words = txt.split('.')
        if len(words) != 4:
            raise Ipv4AddressValueError(txt, 'not n.n.n.n')
        ip = 0
        for word in words:
            if not isdecdigit(word) or len(word) > 3:
                raise Ipv4AddressValueError(txt, 'invalid octet %r' % (word,))
            val = int(word, 10)
            if val > 255:
                raise Ipv4AddressValueError(txt, 'octet too big %r' % (word,))
            ip = (ip << 8) + val
        return ip

    @staticmethod
    def _to_string(ip):
        """Convert an integer to an IPv4 address string.

        Args:
            ip: The address integer

        Returns:
            The address string
        """
        return '%s.%s.%s.%s' % (ip >> 24 & 0xff, ip >> 16 & 0xff,
                                ip >>  8 & 0xff, ip >>  0 & 0xff)

    def octets(self):
        """The four octets of the address, most significant first."""
        return self._groups()

    @property
    def is_loopback(self):
        """Test if the address is a loopback address.

        Returns:
            A boolean, True if the address is a loopback per RFC 3330.
        """
        return self._constants._loopback_net._contains(self._ip)

    @property
    def is_private(self):
        """Test if this address is allocated for private networks.

        Returns:
            A boolean, True if the address is in one of the RFC 1918
            private networks.
        """
        for net in self._constants._private_nets:
            if net._contains(self._ip):
                return True
        return False

class Ipv4Cidr(_BaseCidr, _BaseIpv4):
    """An IPv4 CIDR block."""

    __slots__ = ('_ip', '_prefixlen')

    _address_class = Ipv4Address
    _error = Ipv4CidrValueError
    _range_error = Ipv4CidrRangeError

# =============================================================================

class _Ipv4Constants:

    _loopback_net = Ipv4Cidr('127.0.0.0/8')
    _private_nets = (
        Ipv4Cidr('10.0.0.0/8'),
        Ipv4Cidr('172.16.0.0/12'),
        Ipv4Cidr('192.168.0.0/16'),
    )
    _linklocal_net = Ipv4Cidr('169.254.0.0/16')
    _multicast_net = Ipv4Cidr('224.0.0.0/4')

Ipv4Address._constants = _Ipv4Constants
