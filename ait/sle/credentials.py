# Advanced Multi-Mission Operations System (AMMOS) Instrument Toolkit (AIT)
# Bespoke Link to Instruments and Small Satellites (BLISS)
#
# Copyright 2017, by the California Institute of Technology. ALL RIGHTS
# RESERVED. United States Government Sponsorship acknowledged. Any
# commercial use must be negotiated with the Office of Technology Transfer
# at the California Institute of Technology.
#
# This software may be subject to U.S. export control laws. By accepting
# this software, the user agrees to comply with all applicable U.S. export
# laws and regulations. User has the responsibility to obtain export licenses,
# or other export authority as may be required before exporting such
# information to foreign countries or providing access to foreign persons.

''' SLE ISP1 Credentials

The ait.sle.credentials module generates and checks the credentials of the
SLE Initial Security Procedure (ISP1, CCSDS 913.1-B-2 section 3.1.2).

Credentials carry the CDS time at which they were generated, a random
number and "the protected": a hash of the DER encoded HashInput structure

    HashInput ::= SEQUENCE
    { time          OCTET STRING (SIZE(8))
    , randomNumber  INTEGER (0 .. 2147483647)
    , userName      VisibleString
    , passWord      OCTET STRING
    }

The password is never transmitted. A receiver recomputes the hash with the
password it knows for the peer and accepts the credentials only if the
hashes match and the embedded time is within the configured delay.
'''

from collections import namedtuple
from enum import Enum
import hashlib
import random

import pyasn1.error
from pyasn1.codec.ber.decoder import decode
from pyasn1.codec.ber.encoder import encode
from pyasn1.codec.der.encoder import encode as der_encode

import ait.core.log
from ait.sle import cds, util
from ait.sle.errors import AuthenticationRejected
from ait.sle.pdu.common import Credentials, HashInput, ISP1Credentials

# Taken from https://public.ccsds.org/Pubs/913x1b2.pdf 3.2.3
MAX_RANDOM_NUMBER = 2147483647

_random = random.SystemRandom()


class HashFunction(Enum):
    ''' Hash used to compute "the protected"

    SLE versions 1 to 3 use SHA-1 (20 bytes), versions 4 and 5 use
    SHA-256 (32 bytes).
    '''
    SHA_1 = 'sha1'
    SHA_256 = 'sha256'

    @property
    def digest_size(self):
        return hashlib.new(self.value).digest_size

    def digest(self, data):
        return hashlib.new(self.value, data).digest()

    @classmethod
    def for_version(cls, version):
        return cls.SHA_1 if version <= 3 else cls.SHA_256

    @classmethod
    def from_name(cls, name):
        ''' Look up a hash function from a configuration string

        Accepts the enum name ('SHA_256') as well as the usual spellings
        ('SHA-256', 'sha256').
        '''
        if isinstance(name, cls):
            return name
        key = str(name).replace('-', '').replace('_', '').lower()
        for hash_function in cls:
            if hash_function.value == key:
                return hash_function
        raise ValueError('Unknown hash function: {}'.format(name))


class IspCredentials(namedtuple('IspCredentials', ['time', 'random_number', 'the_protected'])):
    ''' Decoded content of the 'used' alternative of a Credentials element '''
    __slots__ = ()

    def to_bytes(self):
        isp1_creds = ISP1Credentials()
        isp1_creds['time'] = self.time
        isp1_creds['randomNumber'] = self.random_number
        isp1_creds['theProtected'] = self.the_protected
        return encode(isp1_creds)

    @classmethod
    def from_bytes(cls, encoded):
        decoded, _ = decode(bytes(encoded), asn1Spec=ISP1Credentials())
        return cls(decoded['time'].asOctets(),
                   int(decoded['randomNumber']),
                   decoded['theProtected'].asOctets())


def hash_input(cds_time, random_number, username, password):
    ''' DER encode the HashInput structure for the given values '''
    hash_in = HashInput()
    hash_in['time'] = cds_time
    hash_in['randomNumber'] = random_number
    hash_in['username'] = username
    hash_in['password'] = password
    return der_encode(hash_in)


def calculate_the_protected(hash_function, cds_time, random_number, username, password):
    return hash_function.digest(hash_input(cds_time, random_number, username, password))


def make_credentials(username, password, hash_function=HashFunction.SHA_1,
                     now_millis=None, random_number=None, context=cds.CONTEXT):
    ''' Generate BER encoded ISP1 credentials

    Arguments:
        username:
            The local identifier the peer knows us by.

        password:
            The password (bytes) shared with the peer.

        hash_function:
            The HashFunction used to compute the protected value.

        now_millis:
            Generation time in Unix epoch milliseconds. Defaults to the
            current wall-clock time. Sub-millisecond resolution is not used.

        random_number:
            Random number in [0, 2^31 - 1]. A fresh one is drawn when not
            given.

    Returns:
        The BER encoded ISP1Credentials structure.
    '''
    if now_millis is None:
        now_millis = util.current_time_millis()
    if random_number is None:
        random_number = _random.randint(0, MAX_RANDOM_NUMBER)

    credential_time = cds.encode_cds(now_millis, 0, context=context)
    the_protected = calculate_the_protected(hash_function, credential_time,
                                            random_number, username, password)
    return IspCredentials(credential_time, random_number, the_protected).to_bytes()


def build_credentials(fill, username=None, password=None, hash_function=HashFunction.SHA_1):
    ''' Build the Credentials PDU element

    When ``fill`` is False the 'unused' alternative is returned and no
    credentials are generated.
    '''
    creds = Credentials()
    if fill:
        creds['used'] = make_credentials(username, password, hash_function)
    else:
        creds['unused'] = None
    return creds


def used_credentials(creds):
    ''' Return the encoded ISP1 credentials of a Credentials element, or None '''
    if creds is None or not creds.isValue or creds.getName() != 'used':
        return None
    return creds['used'].asOctets()


def verify_credentials(remote_peer, encoded_credentials, auth_delay, now_millis=None,
                       context=cds.CONTEXT):
    ''' Check credentials received from a remote peer

    Raises:
        AuthenticationRejected: if the credentials cannot be decoded, are
            outside the acceptable delay or do not hash to the expected
            protected value.
    '''
    if encoded_credentials is None:
        raise AuthenticationRejected(remote_peer.peer_id, 'no credentials provided')

    try:
        received = IspCredentials.from_bytes(encoded_credentials)
    except (pyasn1.error.PyAsn1Error, TypeError, ValueError) as e:
        ait.core.log.warn('Cannot decode credentials from remote peer {}, encoded credentials are\n{}'.format(
            remote_peer.peer_id, util.hexdump(encoded_credentials)))
        raise AuthenticationRejected(remote_peer.peer_id, 'undecodable credentials: {}'.format(e))

    try:
        cred_millis, _ = cds.decode_cds(received.time, cds.Precision.MILLISECOND, context)
    except ValueError as e:
        ait.core.log.warn('Cannot read time from credentials of remote peer {}, CDS time is\n{}'.format(
            remote_peer.peer_id, util.hexdump(received.time)))
        raise AuthenticationRejected(remote_peer.peer_id, str(e))

    if now_millis is None:
        now_millis = util.current_time_millis()

    delay = now_millis - cred_millis
    if abs(delay) > auth_delay * 1000:
        ait.core.log.warn(
            'Cannot verify credentials of remote peer {}, acceptable delay exceeded, '
            'now={}, time={}, acceptable delay in ms={}'.format(
                remote_peer.peer_id, now_millis, cred_millis, auth_delay * 1000))
        raise AuthenticationRejected(remote_peer.peer_id, 'acceptable delay exceeded')

    # Recompute from the received time bytes so any microsecond field is hashed as sent
    expected = calculate_the_protected(remote_peer.hash_function, received.time,
                                       received.random_number, remote_peer.peer_id,
                                       remote_peer.password)
    # TODO: switch to hmac.compare_digest once the constant-time comparison is signed off
    if expected != received.the_protected:
        ait.core.log.warn('Credentials of remote peer {} do not match, protected value is\n{}'.format(
            remote_peer.peer_id, util.hexdump(received.the_protected)))
        raise AuthenticationRejected(remote_peer.peer_id, 'protected value mismatch')


def perform_authentication(remote_peer, encoded_credentials, auth_delay, now_millis=None,
                           context=cds.CONTEXT):
    ''' Authenticate credentials received from a remote peer

    Arguments:
        remote_peer:
            The RemotePeer the credentials claim to come from.

        encoded_credentials:
            The BER encoded ISP1Credentials ('used' alternative content).

        auth_delay:
            Maximum acceptable difference, in seconds, between the
            credentials time and the local time.

    Returns:
        True if the credentials are valid, False otherwise. Failures are
        logged and never raised.
    '''
    try:
        verify_credentials(remote_peer, encoded_credentials, auth_delay, now_millis, context)
    except AuthenticationRejected as e:
        ait.core.log.info(str(e))
        return False
    return True
