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

''' AIT Space Link Extension (SLE) protocol engine

The ait.sle package provides the pieces needed to run one side (user or
provider) of an SLE service instance: the CCSDS CDS time codec, ISP1
credential generation and verification, service instance identifier
handling, the binding state machine and its rate statistics.
'''

__version__ = '1.0.0'
