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

''' Service Instance Listeners

Listeners observe a service instance: binding state changes, PDUs sent and
received, and PDUs rejected. Each registered listener gets its own queue
and greenlet, so notifications reach a listener in the order they were
raised, never while the service instance holds its state lock, and a
failing listener does not affect the service instance or other listeners.
'''

import itertools

import gevent
import gevent.queue

import ait.core.log


class ServiceInstanceListener(object):
    ''' Base listener, every notification is a no-op '''

    def state_updated(self, si, state):
        pass

    def pdu_received(self, si, name, pdu, encoded):
        pass

    def pdu_sent(self, si, name, pdu, encoded):
        pass

    def pdu_rejected(self, si, name, reason):
        pass


class _ListenerChannel(object):

    def __init__(self, listener):
        self.listener = listener
        self._queue = gevent.queue.Queue()
        self._worker = gevent.spawn(self._run)

    def put(self, method, args):
        self._queue.put((method, args))

    def close(self):
        self._queue.put(StopIteration)

    def _run(self):
        for method, args in self._queue:
            try:
                getattr(self.listener, method)(*args)
            except Exception as e:
                ait.core.log.error('Listener {} failed handling {}: {}'.format(self.listener, method, e))


class ListenerRegistry(object):
    ''' Mapping of subscription handles to listener channels '''

    def __init__(self):
        self._channels = {}
        self._handles = itertools.count(1)

    def __len__(self):
        return len(self._channels)

    def register(self, listener):
        handle = next(self._handles)
        self._channels[handle] = _ListenerChannel(listener)
        return handle

    def deregister(self, handle):
        channel = self._channels.pop(handle, None)
        if channel is not None:
            channel.close()
        return channel is not None

    def notify(self, method, *args):
        for channel in list(self._channels.values()):
            channel.put(method, args)

    def close(self):
        for handle in list(self._channels):
            self.deregister(handle)
