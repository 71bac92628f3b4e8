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


class SleError(Exception):
    pass


class InvalidTimeValue(SleError, ValueError):
    ''' Negative or out-of-range value handed to the CDS encoder '''


class EpochUnderflow(SleError, ValueError):
    ''' CDS day field earlier than the Unix epoch '''

    def __init__(self, cds_bytes):
        self.cds_bytes = bytes(cds_bytes)
        super(EpochUnderflow, self).__init__(
            'CDS time {} is earlier than 1970-01-01'.format(self.cds_bytes.hex().upper()))


class AuthenticationRejected(SleError):
    def __init__(self, peer_id, reason):
        self.peer_id = peer_id
        self.reason = reason
        super(AuthenticationRejected, self).__init__(
            'Authentication of peer {} rejected: {}'.format(peer_id, reason))


class UnsupportedServiceType(SleError, ValueError):
    def __init__(self, service_type):
        self.service_type = service_type
        super(UnsupportedServiceType, self).__init__(
            'Service type {} unknown'.format(service_type))


class InvalidServiceInstanceIdentifier(SleError, ValueError):
    pass


class ProtocolViolation(SleError):
    ''' Operation invoked in a binding state that does not allow it '''

    def __init__(self, operation, state):
        self.operation = operation
        self.state = state
        super(ProtocolViolation, self).__init__(
            "Can not comply: {} not allowed in state '{}'".format(operation, state.value))


class TransportTimeout(SleError):
    pass


class OperationRejected(SleError):
    def __init__(self, operation, diagnostic=None):
        self.operation = operation
        self.diagnostic = diagnostic
        super(OperationRejected, self).__init__(
            '{} rejected by peer: {}'.format(operation, diagnostic))


class BindRejected(OperationRejected):
    def __init__(self, diagnostic=None):
        super(BindRejected, self).__init__('BIND', diagnostic)


class StartRejected(OperationRejected):
    def __init__(self, diagnostic=None):
        super(StartRejected, self).__init__('START', diagnostic)


class StopRejected(OperationRejected):
    def __init__(self, diagnostic=None):
        super(StopRejected, self).__init__('STOP', diagnostic)


class OperationTimeout(SleError):
    def __init__(self, operation, timeout):
        self.operation = operation
        self.timeout = timeout
        super(OperationTimeout, self).__init__(
            'No {} return received within {} seconds'.format(operation, timeout))


class BindTimeout(OperationTimeout):
    def __init__(self, timeout):
        super(BindTimeout, self).__init__('BIND', timeout)


class StartTimeout(OperationTimeout):
    def __init__(self, timeout):
        super(StartTimeout, self).__init__('START', timeout)


class StopTimeout(OperationTimeout):
    def __init__(self, timeout):
        super(StopTimeout, self).__init__('STOP', timeout)
