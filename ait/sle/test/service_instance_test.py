import pytest
from pyasn1.codec.ber.encoder import encode
from pyasn1.codec.ber.decoder import decode

from ait.sle.errors import UnsupportedServiceType, InvalidServiceInstanceIdentifier
from ait.sle.pdu import service_instance as sii_pdu
from ait.sle.service_instance import (ServiceType, Role, ServiceInstanceIdentifier,
                                      parse_identifier, format_identifier)

RAF_SII = 'sagr=3.spack=facility-PASS1.rsl-fg=1.raf=onlt1'
CLTU_SII = 'sagr=3.spack=facility-PASS1.fsl-fg=1.cltu=cltu1'


def test_parse_return_identifier():
    sii = parse_identifier(RAF_SII, 'raf')
    assert sii.kinds == ['sagr', 'spack', 'rslFg', 'raf']
    assert sii.values == ['3', 'facility-PASS1', '1', 'onlt1']
    assert len(sii) == 4


def test_parse_forward_identifier():
    sii = parse_identifier(CLTU_SII, ServiceType.CLTU)
    assert sii.kinds == ['sagr', 'spack', 'fslFg', 'cltu']
    assert sii.values == ['3', 'facility-PASS1', '1', 'cltu1']


def test_kinds_follow_service_type_not_keys():
    sii = parse_identifier('a=1.b=2.c=3.d=4', 'rocf')
    assert sii.kinds == ['sagr', 'spack', 'rslFg', 'rocf']
    assert format_identifier(sii) == 'sagr=1.spack=2.rslFg=3.rocf=4'


def test_value_may_contain_equals():
    sii = parse_identifier('sagr=1.spack=x=y.rsl-fg=1.rcf=a', 'rcf')
    assert sii.values[1] == 'x=y'


@pytest.mark.parametrize('identifier', [
    'sagr=1.spack=2.rsl-fg=1',
    'sagr=1.spack=2.rsl-fg=1.raf=onlt1.extra=1',
    'sagr=1.spack2.rsl-fg=1.raf=onlt1',
    '',
])
def test_malformed_identifier(identifier):
    with pytest.raises(InvalidServiceInstanceIdentifier):
        parse_identifier(identifier, 'raf')


def test_unsupported_service_type():
    with pytest.raises(UnsupportedServiceType):
        parse_identifier(RAF_SII, 'rtnBitstr')
    with pytest.raises(UnsupportedServiceType):
        ServiceType.from_application_id(5)


def test_service_type_lookup():
    assert ServiceType.from_name('CLTU') is ServiceType.CLTU
    assert ServiceType.from_application_id(16) is ServiceType.CLTU
    assert ServiceType.from_application_id(0) is ServiceType.RAF
    assert ServiceType.RCF.is_return
    assert not ServiceType.FSP.is_return
    assert Role.from_name('Provider') is Role.PROVIDER


def test_asn1_conversion():
    sii = parse_identifier(RAF_SII, 'raf')
    encoded = encode(sii.to_asn1())
    decoded, _ = decode(encoded, asn1Spec=sii_pdu.ServiceInstanceIdentifier())
    assert ServiceInstanceIdentifier.from_asn1(decoded) == sii
    assert tuple(decoded[3][0]['identifier']) == (1, 3, 112, 4, 3, 1, 2, 22)


def test_asn1_unknown_attribute():
    sii = sii_pdu.ServiceInstanceIdentifier()
    siae = sii_pdu.ServiceInstanceAttributeElement()
    siae['identifier'] = sii_pdu.univ.ObjectIdentifier((1, 2, 3))
    siae['siAttributeValue'] = 'x'
    sia = sii_pdu.ServiceInstanceAttribute()
    sia[0] = siae
    sii[0] = sia
    with pytest.raises(InvalidServiceInstanceIdentifier):
        ServiceInstanceIdentifier.from_asn1(sii)


def test_equality():
    assert parse_identifier(RAF_SII, 'raf') == parse_identifier(RAF_SII, 'raf')
    assert parse_identifier(RAF_SII, 'raf') != parse_identifier(RAF_SII, 'rcf')
    assert hash(parse_identifier(RAF_SII, 'raf')) == hash(parse_identifier(RAF_SII, 'raf'))


def test_same_string_different_service_types():
    raf = parse_identifier('sagr=1.spack=2.rslFg=3.raf=4', 'raf')
    cltu = parse_identifier('sagr=1.spack=2.rslFg=3.raf=4', 'cltu')
    assert raf.kinds == ['sagr', 'spack', 'rslFg', 'raf']
    assert cltu.kinds == ['sagr', 'spack', 'fslFg', 'cltu']
    assert raf.values == cltu.values == ['1', '2', '3', '4']
