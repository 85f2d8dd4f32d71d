"""IPv6 addresses and CIDR blocks.

An IPv6 address may be given as a colon separated hex string, with at
most one '::' run of zeros, an integer in the range 0 to 2**128 - 1, or
a list/tuple of eight 16-bit hextets.  IPv4-mapped addresses may also be
written as '::ffff:a.b.c.d'.  A CIDR block may be given as a string
"address/p", a dict {'address': ..., 'range': p} or an (address, p)
tuple.

    >>> from cidrblock import ipv6
    >>> str(ipv6.address('2001:0db8:0000:0000:0000:0000:0000:0001'))
    '2001:db8::1'
    >>> [str(net) for net in ipv6.cidr('2001:db8::/32').subnet(34)]
    ['2001:db8::/34', '2001:db8:4000::/34', '2001:db8:8000::/34', '2001:db8:c000::/34']
"""

import re

from cidrblock._base import (AddressValueError, CidrRangeError,
                             CidrValueError, _BaseAddress, _BaseCidr,
                             ishexdigit)
from cidrblock.ipv4 import Ipv4Address, Ipv4AddressValueError

# =============================================================================
# Module specific constants
# =============================================================================

# The maximum and minimum integer values of an IPv6 address
MAX_SIZE = 2**128 - 1
MIN_SIZE = 0

# The maximum and minimum CIDR prefix lengths
MAX_RANGE = 128
MIN_RANGE = 0

_ipv4_mapped_re = re.compile(
        r'::ffff:([0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3})',
        re.IGNORECASE)

# =============================================================================
# Module specific exceptions
# =============================================================================

class Ipv6AddressValueError(AddressValueError):
    """An IPv6 address literal failed validation."""

    _family = 'IPv6'

class Ipv6CidrValueError(CidrValueError):
    """An IPv6 CIDR literal failed validation."""

    _family = 'IPv6'

class Ipv6CidrRangeError(CidrRangeError):
    """An IPv6 prefix length is out of bounds for subnetting."""

# =============================================================================
# Factory and validation functions
# =============================================================================

def address(ip):
    """Create an IPv6 address from an address literal.

    Args:
        ip: A colon separated hex string, an integer or eight hextets.

    Returns:
        An Ipv6Address object.

    Raises:
        Ipv6AddressValueError: if ip is not a valid IPv6 address.
    """
    return Ipv6Address(ip)

def cidr(cidr):
    """Create an IPv6 CIDR block from a CIDR literal.

    Args:
        cidr: A string 'address/p', a dict with 'address' and 'range'
            keys, or an (address, range) tuple.

    Returns:
        An Ipv6Cidr object.

    Raises:
        Ipv6CidrValueError: if cidr is not a valid IPv6 CIDR.
    """
    return Ipv6Cidr(cidr)

def is_valid_address(ip):
    """Test if ip is a valid IPv6 address literal; never raises."""
    try:
        Ipv6Address.parse(ip)
    except Ipv6AddressValueError:
        return False
    return True

def is_valid_cidr(cidr):
    """Test if cidr is a valid IPv6 CIDR literal; never raises.

    As for IPv4, only the leading integer of a string prefix is used.
    """
    try:
        Ipv6Cidr.parse(cidr)
    except Ipv6CidrValueError:
        return False
    return True

def parse_hextets(ip):
    """Convert an IPv6 address literal to a list of eight hextets.

    Example:
        >>> parse_hextets('::ffff:192.168.1.1')
        [0, 0, 0, 0, 0, 65535, 49320, 257]

    Raises:
        Ipv6AddressValueError: if ip is not a valid IPv6 address.
    """
    return Ipv6Address(ip).hextets()

# =============================================================================
# IPv6 classes
# =============================================================================

class _BaseIpv6:
    """A Base class mix-in for IPv6 classes."""

    __slots__ = ()

    _version = 6
    _max_address = MAX_SIZE
    _address_len = MAX_RANGE

class Ipv6Address(_BaseAddress, _BaseIpv6):
    """An IPv6 Address."""

    __slots__ = ('_ip',)

    _group_bits = 16
    _group_count = 8
    _separator = ':'
    _error = Ipv6AddressValueError

    @staticmethod
    def from_string(txt):
        """Convert an IPv6 address string to an integer.

        The string format is "n1:n2:n3:n4:n5:n6:n7:n8", where n1 to n8
        are hexadecimal integers in the range 0 to FFFF, inclusive, of
        1 to 4 digits.  A single sequence of consecutive words with a
        value of 0 may be represented as '::'.

        An IPv4-mapped address may be written as "::ffff:a.b.c.d", where
        a, b, c and d are decimal integers in the range 0 to 255.

        Spaces are not permitted anywhere in the string.

        Args:
            txt: An IPv6 address string

        Returns:
            The IPv6 address as an integer

        Raises:
            Ipv6AddressValueError if the string is not a valid IPv6 address.
        """
        m = _ipv4_mapped_re.fullmatch(txt)
        if m:
            try:
                ipv4_part = Ipv4Address.from_string(m.group(1))
            except Ipv4AddressValueError:
                raise Ipv6AddressValueError(txt, 'invalid IPv4 part') from None
            return 0xffff << 32 | ipv4_part
        parts = txt.split('::')
        numparts = len(parts)
        if numparts > 2:
            raise Ipv6AddressValueError(txt, 'multiple "::" ranges')
        # words before (head) and after (tail) the '::'
        head = parts[0].split(':') if parts[0] else []
        if numparts == 2:
            tail = parts[1].split(':') if parts[1] else []
            missing = 8 - len(head) - len(tail)
            if missing < 0:
                raise Ipv6AddressValueError(txt, 'too many words')
            # fill the gap with 0's
            words = head + ['0'] * missing + tail
        else:
            words = head
        if len(words) != 8:
            raise Ipv6AddressValueError(txt, 'too many/few words')
        ip = 0
        for word in words:
            if not ishexdigit(word) or len(word) > 4:
                raise Ipv6AddressValueError(txt, 'invalid word %r' % (word,))
            ip = (ip << 16) + int(word, 16)
        return ip

    @classmethod
    def _to_string(cls, ip):
        """Convert an integer to a compressed IPv6 address string.

        The first of the longest runs of two or more zero words is
        replaced with '::'.

        Args:
            ip: The address integer

        Returns:
            The address string
        """
        words = cls._split_groups(ip)
        # (start, length) of the longest run of zeros, and of the current one
        best = 0, 0
        start = length = 0
        for index, word in enumerate(words):
            if word:
                length = 0
                continue
            if length == 0:
                start = index
            length += 1
            if length > best[1]:
                best = start, length
        start, length = best
        if length > 1:
            head = ':'.join('%x' % x for x in words[:start])
            tail = ':'.join('%x' % x for x in words[start + length:])
            return '::'.join([head, tail])
        return ':'.join('%x' % x for x in words)

    @classmethod
    def _to_string_exploded(cls, ip):
        """Convert an integer to an exploded IPv6 address string.

        Args:
            ip: The address integer

        Returns:
            The address string, every word as 4 hex digits
        """
        return ':'.join('%04x' % x for x in cls._split_groups(ip))

    def hextets(self):
        """The eight hextets of the address, most significant first."""
        return self._groups()

    def to_full_string(self):
        """The address with every hextet as 4 hex digits, uncompressed."""
        return self._to_string_exploded(self._ip)

    to_bigint = _BaseAddress.to_number

    @property
    def exploded(self):
        """The fully expanded string representation of the IP address."""
        return self._to_string_exploded(self._ip)

    @property
    def ipv4_mapped(self):
        """Return the IPv4 mapped address, if there is one, or None."""
        if self._ip >> 32 == 0xffff:
            return Ipv4Address._from_int(self._ip & 0xffffffff)
        return None

    @property
    def is_loopback(self):
        """Test if the address is a loopback address.

        Returns:
            A boolean, True if the address is a loopback address as
            defined in RFC 2373 2.5.3.
        """
        return self._ip == 1

    @property
    def is_unspecified(self):
        """Test if the address is unspecified.

        Returns:
            A boolean, True if this is the unspecified address as
            defined in RFC 2373 2.5.2.
        """
        return self._ip == 0

    @property
    def is_unique_local(self):
        """Test if the address is a unique local address, fc00::/7.

        See RFC 4193.
        """
        return self._constants._uniquelocal_net._contains(self._ip)

    @property
    def is_ipv4_mapped(self):
        """Test if the address is an IPv4-mapped address, ::ffff:0:0/96."""
        return self._constants._ipv4mapped_net._contains(self._ip)

    @property
    def is_documentation(self):
        """Test if the address is reserved for documentation.

        Returns:
            A boolean, True if the address is in 2001:db8::/32, as
            defined in RFC 3849.
        """
        return self._constants._documentation_net._contains(self._ip)

class Ipv6Cidr(_BaseCidr, _BaseIpv6):
    """An IPv6 CIDR block."""

    __slots__ = ('_ip', '_prefixlen')

    _address_class = Ipv6Address
    _error = Ipv6CidrValueError
    _range_error = Ipv6CidrRangeError

    @property
    def exploded(self):
        """The full string representation of the CIDR block."""
        return f'{Ipv6Address._to_string_exploded(self._ip)}/{self._prefixlen}'

# =============================================================================

class _Ipv6Constants:

    _multicast_net = Ipv6Cidr('ff00::/8')
    _linklocal_net = Ipv6Cidr('fe80::/10')
    _uniquelocal_net = Ipv6Cidr('fc00::/7')
    _ipv4mapped_net = Ipv6Cidr('::ffff:0:0/96')
    _documentation_net = Ipv6Cidr('2001:db8::/32')

Ipv6Address._constants = _Ipv6Constants
