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

import unittest

import mock

import ait.core
from ait.sle.credentials import HashFunction
from ait.sle.peers import (PeerConfiguration, RemotePeer, ServiceInstanceConfiguration,
                           load_peer_configuration, load_service_instances)
from ait.sle.service_instance import ServiceType, Role

CONFIG = {
    'sle': {
        'return_timeout': 5,
        'peers': {
            'local_id': 'LSE',
            'local_password': 'AABBCCDDEEFF',
            'auth_delay': 60,
            'remote_peers': [
                {'id': 'SSE', 'password': '0011223344', 'hash': 'SHA-256'},
                {'id': 'OTHER', 'password': '99'},
            ],
        },
        'service_instances': [
            {'service_instance_identifier': 'sagr=1.spack=VST-PASS0001.rsl-fg=1.raf=onlt1',
             'service_type': 'raf',
             'role': 'user',
             'initiator_id': 'LSE',
             'responder_id': 'SSE',
             'auth_level': 'bind'},
            {'service_instance_identifier': 'sagr=1.spack=VST-PASS0001.fsl-fg=1.cltu=cltu1',
             'service_type': 'cltu',
             'role': 'provider',
             'version': 4},
        ],
    },
}


def mock_config(data):
    ''' Mock of ait.config answering dotted lookups from nested dicts '''
    def get(name, default=None):
        value = data
        for part in name.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    config = mock.MagicMock()
    config.get.side_effect = get
    return config


class PeerConfigurationTest(unittest.TestCase):

    def setUp(self):
        self.config = mock_config(CONFIG)

    def test_load_peers(self):
        peers = load_peer_configuration(self.config.get('sle.peers'))
        assert peers.local_id == 'LSE'
        assert peers.local_password == b'\xaa\xbb\xcc\xdd\xee\xff'
        assert peers.auth_delay == 60
        assert len(peers.remote_peers) == 2

        sse = peers.lookup('SSE')
        assert sse.password == b'\x00\x11\x22\x33\x44'
        assert sse.hash_function is HashFunction.SHA_256
        assert peers.lookup('OTHER').hash_function is HashFunction.SHA_1
        assert peers.lookup('UNKNOWN') is None

    def test_load_peers_from_module_config(self):
        with mock.patch.object(ait, 'config', self.config):
            peers = load_peer_configuration()
        assert peers.lookup('SSE') is not None
        assert peers.auth_delay == 60
        assert peers.local_password == b'\xaa\xbb\xcc\xdd\xee\xff'
        self.config.get.assert_any_call('sle.peers.local_id', 'LSE')

    def test_load_service_instances_from_module_config(self):
        with mock.patch.object(ait, 'config', self.config):
            instances = load_service_instances()
        assert [si.service_type for si in instances] == [ServiceType.RAF, ServiceType.CLTU]
        assert instances[0].return_timeout == 5.0

    def test_keyword_arguments_override_module_config(self):
        with mock.patch.object(ait, 'config', self.config):
            si = ServiceInstanceConfiguration(
                service_instance_identifier='sagr=1.spack=2.rsl-fg=1.rcf=x', service_type='rcf',
                return_timeout=1)
        assert si.return_timeout == 1.0

    def test_load_service_instances(self):
        user, provider = load_service_instances(self.config.get('sle.service_instances'))

        assert user.service_type is ServiceType.RAF
        assert user.role is Role.USER
        assert user.sii.kinds == ['sagr', 'spack', 'rslFg', 'raf']
        assert user.auth_level == 'bind'
        assert user.local_id == 'LSE'
        assert user.remote_id == 'SSE'
        assert user.version == 5
        assert user.auth_delay is None

        assert provider.service_type is ServiceType.CLTU
        assert provider.role is Role.PROVIDER
        assert provider.version == 4
        assert provider.local_id == 'SSE'
        assert provider.remote_id == 'LSE'

    def test_module_config_defaults(self):
        with mock.patch.object(ait, 'config', self.config):
            si = ServiceInstanceConfiguration(
                service_instance_identifier='sagr=1.spack=2.rsl-fg=1.rcf=x', service_type='rcf')
        assert si.return_timeout == 5.0
        assert si.send_timeout == 10.0
        assert si.data_auth_failure == 'ignore'

    def test_invalid_settings(self):
        sii = 'sagr=1.spack=2.rsl-fg=1.raf=x'
        with self.assertRaises(ValueError):
            ServiceInstanceConfiguration(service_instance_identifier=sii, auth_level='sometimes')
        with self.assertRaises(ValueError):
            ServiceInstanceConfiguration(service_instance_identifier=sii, data_auth_failure='retry')
        with self.assertRaises(ValueError):
            ServiceInstanceConfiguration(service_instance_identifier=sii, role='observer')

    def test_missing_identifier(self):
        with mock.patch.object(ait, 'config', mock_config({})):
            with self.assertRaises(ValueError):
                ServiceInstanceConfiguration(service_type='raf')

    def test_peer_configuration_direct(self):
        peers = PeerConfiguration('LSE', b'\x01', [RemotePeer('SSE', b'\x02', HashFunction.SHA_1)])
        assert peers.lookup('SSE').password == b'\x02'
        assert peers.auth_delay == 180
