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

''' SLE Peer and Service Instance Configuration

Peers and service instances are read from the ``sle`` section of the AIT
configuration (``ait.config``, loaded from the file named by ``AIT_CONFIG``)::

  default:
    sle:
      peers:
        local_id: LSE
        local_password: 'AABBCCDDEEFF'
        auth_delay: 180
        remote_peers:
          - id: SSE
            password: '0011223344'
            hash: SHA-256
      service_instances:
        - service_instance_identifier: sagr=1.spack=VST-PASS0001.rsl-fg=1.raf=onlt1
          service_type: raf
          role: user
          initiator_id: LSE
          responder_id: SSE
          version: 5
          auth_level: bind

Passwords are hex strings.
'''

import binascii

import ait.core
import ait.core.log
from ait.sle.credentials import HashFunction
from ait.sle.service_instance import ServiceType, Role, parse_identifier

AUTH_LEVELS = ('none', 'bind', 'all')
DATA_AUTH_FAILURE_POLICIES = ('ignore', 'abort')


def _password(value):
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return binascii.unhexlify(str(value).strip())


class RemotePeer(object):
    ''' Identity, shared password and hash function of a remote peer '''

    def __init__(self, peer_id, password, hash_function=HashFunction.SHA_1):
        self.peer_id = peer_id
        self.password = _password(password)
        self.hash_function = HashFunction.from_name(hash_function)

    def __repr__(self):
        return 'RemotePeer({!r}, {})'.format(self.peer_id, self.hash_function.name)


class PeerConfiguration(object):
    ''' Local identity plus the directory of known remote peers '''

    def __init__(self, local_id, local_password, remote_peers=(), auth_delay=180):
        self.local_id = local_id
        self.local_password = _password(local_password)
        self.auth_delay = int(auth_delay)
        self._remote_peers = dict((p.peer_id, p) for p in remote_peers)

    @property
    def remote_peers(self):
        return list(self._remote_peers.values())

    def lookup(self, peer_id):
        ''' Return the RemotePeer with the given id, or None if unknown '''
        return self._remote_peers.get(str(peer_id))


class ServiceInstanceConfiguration(object):
    ''' Settings of one SLE service instance

    Every setting can be given as a keyword argument; anything not given is
    read from the ``sle`` section of ``ait.config`` before falling
    back to the default.
    '''

    def __init__(self, *args, **kwargs):
        self.service_type = ServiceType.from_name(
            kwargs.get('service_type', ait.config.get('sle.service_type', 'raf')))
        self.role = Role.from_name(kwargs.get('role', ait.config.get('sle.role', 'user')))

        self.service_instance_identifier = kwargs.get(
            'service_instance_identifier', ait.config.get('sle.inst_id', None))
        if not self.service_instance_identifier:
            raise ValueError('No service instance identifier provided.')
        self.sii = parse_identifier(self.service_instance_identifier, self.service_type)

        self.initiator_id = kwargs.get('initiator_id', ait.config.get('sle.initiator_id', 'LSE'))
        self.responder_id = kwargs.get('responder_id', ait.config.get('sle.responder_id', 'SSE'))
        self.responder_port = kwargs.get('responder_port', ait.config.get('sle.responder_port', 'default'))
        self.version = int(kwargs.get('version', ait.config.get('sle.version', 5)))
        self.auth_level = kwargs.get('auth_level', ait.config.get('sle.auth_level', 'none'))
        self.auth_delay = kwargs.get('auth_delay', ait.config.get('sle.auth_delay', None))
        self.return_timeout = float(kwargs.get('return_timeout', ait.config.get('sle.return_timeout', 30)))
        self.send_timeout = float(kwargs.get('send_timeout', ait.config.get('sle.send_timeout', 10)))
        self.data_auth_failure = kwargs.get('data_auth_failure',
                                            ait.config.get('sle.data_auth_failure', 'ignore'))

        if self.auth_level not in AUTH_LEVELS:
            raise ValueError('Authentication level must be one of: "none", "bind", "all"')

        if self.data_auth_failure not in DATA_AUTH_FAILURE_POLICIES:
            raise ValueError('Data authentication failure policy must be one of: "ignore", "abort"')

    @property
    def local_id(self):
        return self.initiator_id if self.role is Role.USER else self.responder_id

    @property
    def remote_id(self):
        return self.responder_id if self.role is Role.USER else self.initiator_id


def load_peer_configuration(data=None):
    ''' Build a PeerConfiguration from a ``peers`` mapping

    Without ``data`` each setting is read from ``sle.peers.<key>`` in
    ``ait.config``.
    '''
    def setting(key, default):
        if data is None:
            return ait.config.get('sle.peers.' + key, default)
        return data.get(key, default)

    remote_peers = []
    for peer in setting('remote_peers', []):
        remote_peers.append(RemotePeer(peer['id'], peer.get('password'),
                                       peer.get('hash', 'SHA-1')))

    peers = PeerConfiguration(setting('local_id', 'LSE'),
                              setting('local_password', None),
                              remote_peers,
                              setting('auth_delay', 180))
    ait.core.log.debug('Loaded {} remote peer(s) for local id {}'.format(len(remote_peers), peers.local_id))
    return peers


def load_service_instances(data=None):
    ''' Build ServiceInstanceConfigurations from a list of mappings

    Without ``data`` the ``sle.service_instances`` list in ``ait.config``
    is used.
    '''
    if data is None:
        data = ait.config.get('sle.service_instances', [])
    return [ServiceInstanceConfiguration(**entry) for entry in data]
