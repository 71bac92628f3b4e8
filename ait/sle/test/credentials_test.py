import hashlib

import pytest
from pyasn1.codec.der.encoder import encode as der_encode

import ait.sle.cds as cds
import ait.sle.credentials as credentials
from ait.sle.credentials import HashFunction, IspCredentials
from ait.sle.errors import AuthenticationRejected
from ait.sle.peers import RemotePeer

NOW = 1600000000000
PASSWORD = '000102030405060708090a0b0c0d0e0f'


@pytest.fixture()
def peer():
    return RemotePeer('SSE', PASSWORD, 'SHA-256')


@pytest.fixture()
def encoded(peer):
    return credentials.make_credentials('SSE', peer.password, HashFunction.SHA_256,
                                        now_millis=NOW, random_number=12345)


def test_hash_function_for_version():
    assert HashFunction.for_version(1) is HashFunction.SHA_1
    assert HashFunction.for_version(3) is HashFunction.SHA_1
    assert HashFunction.for_version(4) is HashFunction.SHA_256
    assert HashFunction.for_version(5) is HashFunction.SHA_256
    assert HashFunction.SHA_1.digest_size == 20
    assert HashFunction.SHA_256.digest_size == 32


def test_hash_function_from_name():
    assert HashFunction.from_name('SHA-1') is HashFunction.SHA_1
    assert HashFunction.from_name('sha256') is HashFunction.SHA_256
    assert HashFunction.from_name('SHA_256') is HashFunction.SHA_256
    with pytest.raises(ValueError):
        HashFunction.from_name('md5')


def test_make_credentials_content(peer, encoded):
    decoded = IspCredentials.from_bytes(encoded)
    assert decoded.time == cds.encode_cds(NOW)
    assert decoded.random_number == 12345

    hash_input = credentials.hash_input(decoded.time, 12345, 'SSE', peer.password)
    assert decoded.the_protected == hashlib.sha256(hash_input).digest()


def test_hash_input_is_der():
    hash_input = credentials.hash_input(cds.encode_cds(NOW), 1, 'LSE', b'\x01\x02')
    assert hash_input[0] == 0x30
    assert der_encode(credentials.HashInput()) is not None


def test_sha1_credentials_length():
    encoded = credentials.make_credentials('LSE', b'\xaa\xbb', HashFunction.SHA_1, now_millis=NOW)
    assert len(IspCredentials.from_bytes(encoded).the_protected) == 20


def test_random_number_range():
    for _ in range(50):
        encoded = credentials.make_credentials('LSE', b'\xaa', now_millis=NOW)
        assert 0 <= IspCredentials.from_bytes(encoded).random_number <= credentials.MAX_RANDOM_NUMBER


def test_verify_within_window(peer, encoded):
    assert credentials.perform_authentication(peer, encoded, 180, now_millis=NOW)
    assert credentials.perform_authentication(peer, encoded, 180, now_millis=NOW + 180000)
    assert credentials.perform_authentication(peer, encoded, 180, now_millis=NOW - 180000)


def test_verify_outside_window(peer, encoded):
    assert not credentials.perform_authentication(peer, encoded, 180, now_millis=NOW + 180001)
    assert not credentials.perform_authentication(peer, encoded, 180, now_millis=NOW - 180001)

    with pytest.raises(AuthenticationRejected) as excinfo:
        credentials.verify_credentials(peer, encoded, 180, now_millis=NOW + 180001)
    assert excinfo.value.peer_id == 'SSE'


def test_verify_mutated_protected(peer, encoded):
    decoded = IspCredentials.from_bytes(encoded)
    for i in range(len(decoded.the_protected)):
        mutated = bytearray(decoded.the_protected)
        mutated[i] ^= 0x01
        tampered = decoded._replace(the_protected=bytes(mutated)).to_bytes()
        assert not credentials.perform_authentication(peer, tampered, 180, now_millis=NOW)


def test_verify_wrong_password(encoded):
    other = RemotePeer('SSE', 'ffff', 'SHA-256')
    assert not credentials.perform_authentication(other, encoded, 180, now_millis=NOW)


def test_verify_wrong_hash_function(encoded):
    other = RemotePeer('SSE', PASSWORD, 'SHA-1')
    assert not credentials.perform_authentication(other, encoded, 180, now_millis=NOW)


def test_verify_garbage(peer):
    assert not credentials.perform_authentication(peer, b'\x01\x02\x03', 180, now_millis=NOW)
    assert not credentials.perform_authentication(peer, None, 180, now_millis=NOW)


def test_verify_time_before_unix_epoch(peer):
    early = cds.CdsTime(100, 0, 0, cds.Precision.MILLISECOND).to_bytes()
    protected = credentials.calculate_the_protected(HashFunction.SHA_256, early, 1, 'SSE', peer.password)
    encoded = IspCredentials(early, 1, protected).to_bytes()
    assert not credentials.perform_authentication(peer, encoded, 180, now_millis=NOW)


def test_build_credentials():
    unused = credentials.build_credentials(False)
    assert unused.getName() == 'unused'
    assert credentials.used_credentials(unused) is None

    used = credentials.build_credentials(True, 'LSE', b'\x01\x02', HashFunction.SHA_1)
    assert used.getName() == 'used'
    encoded = credentials.used_credentials(used)
    assert len(IspCredentials.from_bytes(encoded).the_protected) == 20
