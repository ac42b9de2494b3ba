# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 15:31:09 2026

@author: MBHEX

The solvers assume the stream labelled hot is the hotter one at supply. When the labels are
the other way around, the inputs are swapped before solving and the result is swapped back,
so that callers always get the result under their own labels.
"""
import logging
from MBHEX.models.Fluid import ThermoProps
from MBHEX.models.Parameters import ExchangerParameters, InputMode, StreamState

logger = logging.getLogger("Orientation")

def calculateSupplyTemperature(stream: StreamState):
    if stream.inputMode is InputMode.TEMPERATURE:
        return stream.inletValue
    return stream.fluid.calculateTemperature(ThermoProps.HP, stream.inletValue, stream.pressure)

def needsReversal(hotStream: StreamState, coldStream: StreamState):
    return calculateSupplyTemperature(hotStream) < calculateSupplyTemperature(coldStream)

def normalizeOrientation(hotStream: StreamState, coldStream: StreamState, params: ExchangerParameters):
    """
    Puts the hotter stream in the hot role. The inputs are never modified.

    Returns
    -------
    hotStream : StreamState
        stream in the hot role for the solver.
    coldStream : StreamState
        stream in the cold role for the solver.
    params : ExchangerParameters
        parameters matching the solver roles.
    isReversed : bool
        whether the roles were exchanged.

    """
    if not needsReversal(hotStream, coldStream):
        return hotStream, coldStream, params, False
    logger.debug("hot stream %s is colder than cold stream %s, swapping roles", hotStream, coldStream,
                 extra={"methodname": normalizeOrientation.__name__})
    return coldStream, hotStream, params.swapped(), True

def restoreOrientation(result):
    """
    Brings a result solved with exchanged roles back to the labels of the caller.
    """
    return result.swapRoles()
