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

''' SLE Service Instance

The ait.sle.service module provides the binding state machine shared by
every SLE service type, for both the user and the provider side of a
service instance.

    UNBOUND -> BIND_PENDING -> READY -> START_PENDING -> ACTIVE
    ACTIVE -> STOP_PENDING -> READY -> UNBIND_PENDING -> UNBOUND

User operations (bind, start, stop, unbind) send an invocation, move the
instance to the matching pending state and return a
:class:`gevent.event.AsyncResult` that is resolved when the peer's return
arrives or the return timeout expires. The provider side answers the
peer's invocations as they are received.

All state transitions and counter updates happen under one lock per
service instance. Listener notifications are queued and delivered outside
that lock.

Classes:
    BindingState: The binding states of a service instance.
    UnbindOutcome: How an UNBIND completed.
    ServiceInstance: The binding state machine.
'''

from collections import namedtuple
from enum import Enum
import datetime as dt
import time

import gevent
import gevent.event
import gevent.lock

import pyasn1.error

import ait.core.log
from ait.sle import cds, util
from ait.sle.credentials import HashFunction, build_credentials, used_credentials, perform_authentication
from ait.sle.errors import (SleError, ProtocolViolation, TransportTimeout, UnsupportedServiceType,
                            InvalidServiceInstanceIdentifier, OperationRejected,
                            BindRejected, BindTimeout, StartRejected, StartTimeout,
                            StopRejected, StopTimeout)
from ait.sle.listener import ListenerRegistry
from ait.sle.pdu.operations import SlePdu, encode_pdu, decode_pdu
from ait.sle.service_instance import Role, ServiceType, ServiceInstanceIdentifier
from ait.sle.stats import Counters, RateSample


class BindingState(Enum):
    UNBOUND = 'unbound'
    BIND_PENDING = 'bind pending'
    READY = 'ready'
    START_PENDING = 'start pending'
    ACTIVE = 'active'
    STOP_PENDING = 'stop pending'
    UNBIND_PENDING = 'unbind pending'


BOUND_STATES = (BindingState.READY, BindingState.START_PENDING, BindingState.ACTIVE,
                BindingState.STOP_PENDING, BindingState.UNBIND_PENDING)


class UnbindOutcome(Enum):
    CONFIRMED = 'confirmed'
    TIMEOUT = 'timeout'
    ABORTED = 'aborted'


_PendingOperation = namedtuple('_PendingOperation', ['operation', 'invoke_id', 'result', 'timer',
                                                     'previous_state', 'timeout_error'])


###############################################################################
#
# Service capabilities
#
###############################################################################
class ReturnServiceCapability(object):
    ''' RAF, RCF and ROCF: the provider sends the data '''
    data_sender = Role.PROVIDER

    def fill_start(self, invocation, start_time=None, stop_time=None, frame_quality=2):
        invocation['startTime'] = cds.conditional_time(start_time)
        invocation['stopTime'] = cds.conditional_time(stop_time)
        invocation['startQualifier'] = frame_quality


class ForwardServiceCapability(object):
    ''' CLTU and FSP: the user sends the data '''
    data_sender = Role.USER

    def fill_start(self, invocation, first_id=0):
        invocation['startTime'] = cds.conditional_time(None)
        invocation['stopTime'] = cds.conditional_time(None)
        invocation['startQualifier'] = first_id


CAPABILITIES = {
    ServiceType.RAF: ReturnServiceCapability(),
    ServiceType.RCF: ReturnServiceCapability(),
    ServiceType.ROCF: ReturnServiceCapability(),
    ServiceType.CLTU: ForwardServiceCapability(),
    ServiceType.FSP: ForwardServiceCapability(),
}

# PDU field holding the sender's credentials
CREDENTIAL_FIELDS = {
    'bindInvocation': 'invokerCredentials',
    'bindReturn': 'performerCredentials',
    'unbindInvocation': 'invokerCredentials',
    'unbindReturn': 'responderCredentials',
    'startInvocation': 'invokerCredentials',
    'startReturn': 'credentials',
    'stopInvocation': 'invokerCredentials',
    'stopReturn': 'credentials',
    'transferDataInvocation': 'invokerCredentials',
}


class ServiceInstance(object):
    ''' SLE service instance binding state machine

    Arguments:
        peer_config:
            The :class:`ait.sle.peers.PeerConfiguration` holding the local
            password and the remote peer directory.

        si_config:
            The :class:`ait.sle.peers.ServiceInstanceConfiguration` of this
            service instance, which also decides the role.

        transport:
            The :class:`ait.sle.transport.Transport` carrying encoded PDUs.
    '''

    def __init__(self, peer_config, si_config, transport):
        self._peers = peer_config
        self._config = si_config
        self._role = si_config.role
        self._service_type = si_config.service_type
        if self._service_type not in CAPABILITIES:
            raise UnsupportedServiceType(self._service_type)
        self._capability = CAPABILITIES[self._service_type]

        self._auth_level = si_config.auth_level
        self._auth_delay = si_config.auth_delay if si_config.auth_delay is not None else peer_config.auth_delay
        self._remote_peer = peer_config.lookup(si_config.remote_id)
        if self._remote_peer is None and self._auth_level != 'none':
            ait.core.log.warn('Remote peer {} is not configured, authentication will fail'.format(
                si_config.remote_id))

        self._lock = gevent.lock.RLock()
        self._state = BindingState.UNBOUND
        self._state_changed = gevent.event.Event()
        self._counters = Counters.ZERO
        self._last_rate = None
        self._pending = None
        self._invoke_id = 0
        self._listeners = ListenerRegistry()

        if self._role is Role.USER:
            self._handlers = {
                'bindReturn': self._bind_return_handler,
                'unbindReturn': self._unbind_return_handler,
                'startReturn': self._start_return_handler,
                'stopReturn': self._stop_return_handler,
            }
        else:
            self._handlers = {
                'bindInvocation': self._bind_invocation_handler,
                'unbindInvocation': self._unbind_invocation_handler,
                'startInvocation': self._start_invocation_handler,
                'stopInvocation': self._stop_invocation_handler,
            }
        if self._capability.data_sender is not self._role:
            self._handlers['transferDataInvocation'] = self._transfer_data_handler
        self._handlers['peerAbortInvocation'] = self._peer_abort_handler

        self._transport = transport
        transport.on_pdu_received(self._pdu_received)

    ###########################################################################
    # Observation
    ###########################################################################
    @property
    def state(self):
        return self._state

    @property
    def role(self):
        return self._role

    @property
    def service_type(self):
        return self._service_type

    @property
    def counters(self):
        ''' Consistent snapshot of the PDU and byte counters '''
        return self._counters

    @property
    def invoke_id(self):
        iid = self._invoke_id
        self._invoke_id = (self._invoke_id + 1) % 65536
        return iid

    def get_current_rate(self):
        ''' RateSample of the counters, with rates since the previous call '''
        sample = RateSample.create(self._counters, self._last_rate)
        self._last_rate = sample
        return sample

    def register(self, listener):
        ''' Subscribe a listener, returning the handle used to deregister it '''
        return self._listeners.register(listener)

    def deregister(self, handle):
        return self._listeners.deregister(handle)

    def wait_for_state(self, state, timeout_millis):
        ''' Block until the binding state is ``state``

        Returns:
            True if the state was reached within ``timeout_millis``
            milliseconds, False otherwise.
        '''
        return self._wait(lambda s: s is state, timeout_millis)

    def wait_for_bind(self, is_provider, timeout_millis):
        ''' Block until the service instance is bound

        Arguments:
            is_provider:
                Whether the caller expects this to be the provider side.
                Raises ValueError when it does not match the role.
        '''
        if is_provider != (self._role is Role.PROVIDER):
            raise ValueError('Service instance role is {}'.format(self._role.value))
        return self._wait(lambda s: s in (BindingState.READY, BindingState.ACTIVE), timeout_millis)

    def _wait(self, predicate, timeout_millis):
        deadline = time.monotonic() + timeout_millis / 1000.0
        while True:
            changed = self._state_changed
            if predicate(self._state):
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            changed.wait(remaining)

    ###########################################################################
    # User operations
    ###########################################################################
    def bind(self, version=None):
        ''' Send a BIND invocation

        Arguments:
            version:
                The SLE version number to request. Defaults to the
                configured version.

        Returns:
            An AsyncResult resolved with the version accepted by the
            provider, or with BindRejected / BindTimeout.
        '''
        version = self._config.version if version is None else version
        with self._lock:
            self._check('BIND', Role.USER, BindingState.UNBOUND)

            pdu = SlePdu()
            inv = pdu['bindInvocation']
            inv['invokerCredentials'] = self._credentials(bind_phase=True)
            inv['initiatorIdentifier'] = self._config.initiator_id
            inv['responderPortIdentifier'] = self._config.responder_port
            inv['serviceType'] = self._service_type.application_id
            inv['versionNumber'] = version
            inv['serviceInstanceIdentifier'] = self._config.sii.to_asn1()

            ait.core.log.info('Sending Bind request ...')
            return self._begin('BIND', BindingState.BIND_PENDING, pdu,
                               BindTimeout(self._config.return_timeout))

    def start(self, **kwargs):
        ''' Send a START invocation

        Keyword arguments are service specific: ``start_time``,
        ``stop_time`` and ``frame_quality`` for return services,
        ``first_id`` for forward services.

        Returns:
            An AsyncResult resolved with True, or with StartRejected /
            StartTimeout.
        '''
        with self._lock:
            self._check('START', Role.USER, BindingState.READY)

            pdu = SlePdu()
            inv = pdu['startInvocation']
            inv['invokerCredentials'] = self._credentials()
            invoke_id = self.invoke_id
            inv['invokeId'] = invoke_id
            self._capability.fill_start(inv, **kwargs)

            ait.core.log.info('Sending data start invocation ...')
            return self._begin('START', BindingState.START_PENDING, pdu,
                               StartTimeout(self._config.return_timeout), invoke_id)

    def stop(self):
        ''' Send a STOP invocation

        Returns:
            An AsyncResult resolved with True, or with StopRejected /
            StopTimeout.
        '''
        with self._lock:
            self._check('STOP', Role.USER, BindingState.ACTIVE)

            pdu = SlePdu()
            inv = pdu['stopInvocation']
            inv['invokerCredentials'] = self._credentials()
            invoke_id = self.invoke_id
            inv['invokeId'] = invoke_id

            ait.core.log.info('Sending data stop invocation ...')
            return self._begin('STOP', BindingState.STOP_PENDING, pdu,
                               StopTimeout(self._config.return_timeout), invoke_id)

    def unbind(self, reason='end'):
        ''' Send an UNBIND invocation

        The service instance ends up UNBOUND whether or not the provider
        confirms.

        Returns:
            An AsyncResult resolved with an UnbindOutcome.
        '''
        with self._lock:
            self._check('UNBIND', Role.USER, BindingState.READY)

            pdu = SlePdu()
            inv = pdu['unbindInvocation']
            inv['invokerCredentials'] = self._credentials()
            inv['unbindReason'] = reason

            ait.core.log.info('Sending Unbind request ...')
            return self._begin('UNBIND', BindingState.UNBIND_PENDING, pdu, None)

    ###########################################################################
    # Operations for both roles
    ###########################################################################
    def transfer_data(self, data, earth_receive_time=None, data_unit_id=0):
        ''' Send one data unit

        Only the data sending side may call this: the provider for return
        services, the user for forward services.
        '''
        with self._lock:
            self._check('TRANSFER-DATA', self._capability.data_sender, BindingState.ACTIVE)

            pdu = SlePdu()
            inv = pdu['transferDataInvocation']
            inv['invokerCredentials'] = self._credentials()
            if earth_receive_time is None:
                earth_receive_time = dt.datetime.now(dt.timezone.utc)
            inv['earthReceiveTime']['ccsdsFormat'] = cds.encode_datetime(earth_receive_time)
            inv['dataUnitId'] = data_unit_id
            inv['data'] = data
            self._send(pdu)

    def peer_abort(self, reason='otherReason'):
        ''' Send a PEER-ABORT and drop to UNBOUND '''
        with self._lock:
            if self._state is BindingState.UNBOUND:
                raise ProtocolViolation('PEER-ABORT', self._state)

            pdu = SlePdu()
            pdu['peerAbortInvocation'] = reason
            ait.core.log.info('Sending Peer Abort')
            try:
                self._send(pdu)
            finally:
                self._abort_pending('local peer abort ({})'.format(reason))
                self._set_state(BindingState.UNBOUND)

    def dispose(self):
        ''' Release timers and listener greenlets '''
        with self._lock:
            self._abort_pending('disposed')
        self._listeners.close()

    ###########################################################################
    # Transition machinery
    ###########################################################################
    def _check(self, operation, role, state):
        if self._role is not role:
            raise ValueError('{} can only be invoked by the {} side'.format(operation, role.value))
        if self._state is not state:
            ait.core.log.warn("Can not comply: {} requires state '{}', current state is '{}'.".format(
                operation, state.value, self._state.value))
            raise ProtocolViolation(operation, self._state)

    def _credentials(self, bind_phase=False):
        fill = self._auth_level == 'all' or (self._auth_level == 'bind' and bind_phase)
        if not fill:
            return build_credentials(False)
        if self._remote_peer is not None:
            hash_function = self._remote_peer.hash_function
        else:
            hash_function = HashFunction.for_version(self._config.version)
        return build_credentials(True, self._config.local_id, self._peers.local_password, hash_function)

    def _set_state(self, state):
        if state is self._state:
            return
        ait.core.log.info('Service instance {} state: {} -> {}'.format(
            self._config.service_instance_identifier, self._state.value, state.value))
        self._state = state
        changed, self._state_changed = self._state_changed, gevent.event.Event()
        changed.set()
        self._listeners.notify('state_updated', self, state)

    def _send(self, pdu):
        name = pdu.getName()
        encoded = encode_pdu(pdu)
        try:
            with gevent.Timeout(self._config.send_timeout,
                                TransportTimeout('Sending {} timed out after {} seconds'.format(
                                    name, self._config.send_timeout))):
                self._transport.send_pdu(encoded)
        except TransportTimeout as e:
            ait.core.log.error(str(e))
            raise
        self._counters = self._counters.sent(len(encoded))
        ait.core.log.debug('Sent {} ({} bytes)'.format(name, len(encoded)))
        self._listeners.notify('pdu_sent', self, name, pdu, encoded)

    def _begin(self, operation, pending_state, pdu, timeout_error, invoke_id=None):
        previous = self._state
        self._send(pdu)
        result = gevent.event.AsyncResult()
        pending = _PendingOperation(operation, invoke_id, result, None, previous, timeout_error)
        timer = gevent.spawn_later(self._config.return_timeout, self._return_timeout, pending)
        self._pending = pending._replace(timer=timer)
        self._set_state(pending_state)
        return result

    def _complete(self, state, value=None, exception=None):
        pending, self._pending = self._pending, None
        if pending.timer is not gevent.getcurrent():
            pending.timer.kill(block=False)
        self._set_state(state)
        if exception is not None:
            pending.result.set_exception(exception)
        else:
            pending.result.set(value)

    def _abort_pending(self, reason):
        if self._pending is None:
            return
        if self._pending.operation == 'UNBIND':
            self._complete(BindingState.UNBOUND, UnbindOutcome.ABORTED)
        else:
            self._complete(BindingState.UNBOUND,
                           exception=OperationRejected(self._pending.operation, reason))

    def _return_timeout(self, pending):
        with self._lock:
            if self._pending is None or self._pending.result is not pending.result:
                return
            ait.core.log.error('No {} return received within {} seconds'.format(
                pending.operation, self._config.return_timeout))
            if pending.operation == 'UNBIND':
                self._complete(BindingState.UNBOUND, UnbindOutcome.TIMEOUT)
            else:
                self._complete(pending.previous_state, exception=pending.timeout_error)

    def _expect_return(self, operation, state, invoke_id=None):
        ''' Check a return matches the outstanding invocation '''
        pending = self._pending
        if self._state is not state or pending is None or pending.operation != operation:
            ait.core.log.error('Unexpected {} return in state {}'.format(operation, self._state.value))
            self._protocol_abort('protocolError')
            return False
        if invoke_id is not None and invoke_id != pending.invoke_id:
            ait.core.log.error('{} return with invoke id {}, expected {}'.format(
                operation, invoke_id, pending.invoke_id))
            self._protocol_abort('unsolicitedInvokeId')
            return False
        return True

    def _protocol_abort(self, reason):
        if self._state is BindingState.UNBOUND:
            return
        try:
            self.peer_abort(reason)
        except (IOError, TransportTimeout) as e:
            ait.core.log.error('Unable to send Peer Abort: {}'.format(e))

    ###########################################################################
    # Inbound PDUs
    ###########################################################################
    def _pdu_received(self, data):
        try:
            pdu = decode_pdu(data)
        except (pyasn1.error.PyAsn1Error, TypeError, ValueError) as e:
            ait.core.log.error('Unable to decode PDU ({}). Skipping ...\n{}'.format(e, util.hexdump(data)))
            return

        name = pdu.getName()
        handler = self._handlers.get(name)
        if handler is None:
            ait.core.log.error('PDU of type {} has no associated handlers. '
                              'Unable to process further and skipping ...'.format(name))
            return

        with self._lock:
            if not self._authenticate(name, pdu):
                self._listeners.notify('pdu_rejected', self, name, 'authentication failed')
                if name == 'transferDataInvocation' and self._config.data_auth_failure == 'abort':
                    self._protocol_abort('accessDenied')
                return
            try:
                accepted = handler(pdu[name])
            except (SleError, ValueError, IOError, pyasn1.error.PyAsn1Error) as e:
                ait.core.log.error('Failed handling {}: {}\n{}'.format(name, e, util.hexdump(data)))
                self._listeners.notify('pdu_rejected', self, name, str(e))
                return
            if accepted:
                self._counters = self._counters.received(len(data))
                ait.core.log.debug('Received {} ({} bytes)'.format(name, len(data)))
                self._listeners.notify('pdu_received', self, name, pdu, bytes(data))

    def _authenticate(self, name, pdu):
        if self._auth_level == 'none' or name not in CREDENTIAL_FIELDS:
            return True
        if self._auth_level == 'bind' and name not in ('bindInvocation', 'bindReturn'):
            return True

        if name == 'bindInvocation':
            peer_id = str(pdu[name]['initiatorIdentifier'])
            peer = self._peers.lookup(peer_id)
        else:
            peer_id = self._config.remote_id
            peer = self._remote_peer
        if peer is None:
            ait.core.log.warn('Cannot authenticate {} from unknown peer {}'.format(name, peer_id))
            return False

        encoded = used_credentials(pdu[name][CREDENTIAL_FIELDS[name]])
        if perform_authentication(peer, encoded, self._auth_delay):
            return True

        ait.core.log.warn('{} from peer {} failed authentication'.format(name, peer_id))
        if name == 'bindInvocation':
            self._send_bind_return(negative='accessDenied')
        return False

    # User side ---------------------------------------------------------------
    def _bind_return_handler(self, ret):
        if not self._expect_return('BIND', BindingState.BIND_PENDING):
            return False

        if str(ret['responderIdentifier']) != self._config.responder_id:
            ait.core.log.error('Bind return from unexpected responder {}'.format(ret['responderIdentifier']))
            self._protocol_abort('unexpectedResponderId')
            return False

        result = ret['result']
        if result.getName() == 'positive':
            ait.core.log.info('Bind successful')
            self._complete(BindingState.READY, int(result['positive']))
        else:
            diag = result['negative'].prettyPrint()
            ait.core.log.info('Bind unsuccessful: {}'.format(diag))
            self._complete(BindingState.UNBOUND, exception=BindRejected(diag))
        return True

    def _unbind_return_handler(self, ret):
        if not self._expect_return('UNBIND', BindingState.UNBIND_PENDING):
            return False
        ait.core.log.info('Unbind successful')
        self._complete(BindingState.UNBOUND, UnbindOutcome.CONFIRMED)
        return True

    def _start_return_handler(self, ret):
        if not self._expect_return('START', BindingState.START_PENDING, int(ret['invokeId'])):
            return False

        result = ret['result']
        if result.getName() == 'positiveResult':
            ait.core.log.info('Start successful')
            self._complete(BindingState.ACTIVE, True)
        else:
            diag = result['negativeResult'].prettyPrint()
            ait.core.log.info('Start unsuccessful: {}'.format(diag))
            self._complete(BindingState.READY, exception=StartRejected(diag))
        return True

    def _stop_return_handler(self, ret):
        if not self._expect_return('STOP', BindingState.STOP_PENDING, int(ret['invokeId'])):
            return False

        result = ret['result']
        if result.getName() == 'positiveResult':
            ait.core.log.info('Stop successful')
            self._complete(BindingState.READY, True)
        else:
            diag = result['negativeResult'].prettyPrint()
            ait.core.log.info('Stop unsuccessful: {}'.format(diag))
            self._complete(BindingState.ACTIVE, exception=StopRejected(diag))
        return True

    # Provider side -----------------------------------------------------------
    def _bind_invocation_handler(self, inv):
        if self._state is not BindingState.UNBOUND:
            ait.core.log.warn('Bind invocation received in state {}'.format(self._state.value))
            self._send_bind_return(negative='alreadyBound')
            return True

        version = int(inv['versionNumber'])
        diag = None
        if str(inv['initiatorIdentifier']) != self._config.initiator_id:
            diag = 'siNotAccessibleToThisInitiator'
        elif not self._same_service_type(inv['serviceType']):
            diag = 'inconsistentServiceType'
        elif version != self._config.version:
            diag = 'versionNotSupported'
        elif not self._same_service_instance(inv['serviceInstanceIdentifier']):
            diag = 'noSuchServiceInstance'

        if diag is not None:
            ait.core.log.info('Rejecting bind from {}: {}'.format(inv['initiatorIdentifier'], diag))
            self._send_bind_return(negative=diag)
            return True

        self._send_bind_return(positive=version)
        ait.core.log.info('Bind accepted from {}'.format(inv['initiatorIdentifier']))
        self._set_state(BindingState.READY)
        return True

    def _same_service_type(self, service_type):
        try:
            return ServiceType.from_application_id(service_type) is self._service_type
        except UnsupportedServiceType:
            return False

    def _same_service_instance(self, sii):
        try:
            return ServiceInstanceIdentifier.from_asn1(sii) == self._config.sii
        except InvalidServiceInstanceIdentifier:
            return False

    def _send_bind_return(self, positive=None, negative=None):
        pdu = SlePdu()
        ret = pdu['bindReturn']
        ret['performerCredentials'] = self._credentials(bind_phase=True)
        ret['responderIdentifier'] = self._config.responder_id
        if negative is None:
            ret['result']['positive'] = positive
        else:
            ret['result']['negative'] = negative
        self._send(pdu)

    def _send_acknowledgement(self, name, invoke_id, diagnostic=None):
        pdu = SlePdu()
        ret = pdu[name]
        ret['credentials'] = self._credentials()
        ret['invokeId'] = invoke_id
        if diagnostic is None:
            ret['result']['positiveResult'] = None
        else:
            ret['result']['negativeResult'] = diagnostic
        self._send(pdu)

    def _unbind_invocation_handler(self, inv):
        if self._state is not BindingState.READY:
            ait.core.log.error('Unbind invocation received in state {}'.format(self._state.value))
            self._protocol_abort('protocolError')
            return False

        ait.core.log.info('Unbind requested: {}'.format(inv['unbindReason'].prettyPrint()))
        pdu = SlePdu()
        ret = pdu['unbindReturn']
        ret['responderCredentials'] = self._credentials()
        ret['result']['positive'] = None
        self._send(pdu)
        self._set_state(BindingState.UNBOUND)
        return True

    def _start_invocation_handler(self, inv):
        if self._state is not BindingState.READY:
            ait.core.log.error('Start invocation received in state {}'.format(self._state.value))
            self._protocol_abort('protocolError')
            return False

        invoke_id = int(inv['invokeId'])
        try:
            start_time = cds.from_conditional_time(inv['startTime'])
            stop_time = cds.from_conditional_time(inv['stopTime'])
        except ValueError as e:
            ait.core.log.error('Rejecting start with unreadable time: {}'.format(e))
            self._send_acknowledgement('startReturn', invoke_id, 'otherReason')
            return True

        self._send_acknowledgement('startReturn', invoke_id)
        ait.core.log.info('Start accepted (start time {}, stop time {})'.format(start_time, stop_time))
        self._set_state(BindingState.ACTIVE)
        return True

    def _stop_invocation_handler(self, inv):
        if self._state is not BindingState.ACTIVE:
            ait.core.log.error('Stop invocation received in state {}'.format(self._state.value))
            self._protocol_abort('protocolError')
            return False

        self._send_acknowledgement('stopReturn', int(inv['invokeId']))
        ait.core.log.info('Stop accepted')
        self._set_state(BindingState.READY)
        return True

    # Both sides --------------------------------------------------------------
    def _transfer_data_handler(self, inv):
        if self._state not in (BindingState.ACTIVE, BindingState.STOP_PENDING):
            ait.core.log.warn('Transfer data received in state {}, dropping'.format(self._state.value))
            return False
        return True

    def _peer_abort_handler(self, diag):
        ait.core.log.error('Peer Abort Received. {}'.format(diag.prettyPrint()))
        self._abort_pending('peer abort ({})'.format(diag.prettyPrint()))
        self._set_state(BindingState.UNBOUND)
        return True
