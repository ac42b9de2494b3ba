# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 09:18:26 2026

@author: MBHEX
"""
from MBHEX.models.Fluid import Fluid
from MBHEX.models.Parameters import ConfigurationError, ExchangerParameters, FinGeometry, InputMode,\
    SideParameters, StreamState, parseEnum
from MBHEX.calculations.Conversions import TemperatureConversions, MassFlowConversions, PressureConversions,\
    parseUnit

ENTHALPY_UNITS = {"J/kg": 1.0, "kJ/kg": 1e3}

def parseFluid(jsonDict):
    fluidName = jsonDict["fluidName"]
    if 'MEG' in fluidName: #assuming form of 'MEG::30%'
        fraction = float(fluidName.split('::')[1].replace('%', ''))/100
        return Fluid("MEG", "IncompressibleBackend", massFraction=fraction)
    if fluidName.startswith('INCOMP::'):
        return Fluid(fluidName.split('::')[1], "INCOMP")
    return Fluid(fluidName, "HEOS")

def parsePressure(jsonDict):
    pc = PressureConversions()
    return pc.convertPressure(parseUnit(pc.Unit, jsonDict["unit"]), pc.Unit.PA, jsonDict["value"])

def parseInletState(jsonDict):
    """
    Reads the supply state of a stream, given as an enthalpy (inputMode H) or a temperature
    (inputMode T)

    Returns
    -------
    inletValue : float
        enthalpy in J/kg or temperature in K.
    inputMode : InputMode
        H or T.

    """
    inputMode = parseEnum(InputMode, jsonDict["inputMode"], "stream input mode")
    if inputMode is InputMode.ENTHALPY:
        if jsonDict["unit"] not in ENTHALPY_UNITS:
            raise ConfigurationError(f"Unknown enthalpy unit '{jsonDict['unit']}'. Expected one of {list(ENTHALPY_UNITS)}")
        return jsonDict["value"]*ENTHALPY_UNITS[jsonDict["unit"]], inputMode
    tc = TemperatureConversions()
    return tc.convertTemperature(parseUnit(tc.Unit, jsonDict["unit"]), tc.Unit.K, jsonDict["value"]), inputMode

def parseMassFlow(jsonDict):
    mfc = MassFlowConversions()
    return mfc.convertMassFlow(parseUnit(mfc.Unit, jsonDict["unit"]), mfc.Unit.KGS, jsonDict["value"])

def parseStream(jsonDict):
    inletValue, inputMode = parseInletState(jsonDict["h_or_T"])
    return StreamState(parseFluid(jsonDict), parsePressure(jsonDict["pressureIn"]), inletValue,
                       parseMassFlow(jsonDict["massFlowIn"]), inputMode)

def parseSideParameters(jsonDict):
    """
    Builds the SideParameters of one stream. Keys are the SideParameters arguments, the fin
    block holds the FinGeometry arguments.
    """
    values = {key: value for key, value in jsonDict.items() if value is not None}
    try:
        if "fin" in values:
            values["fin"] = FinGeometry(**values["fin"])
        return SideParameters(**values)
    except TypeError as error:
        raise ConfigurationError(f"Invalid side parameters: {error}") from error

def parseExchangerParameters(jsonDict):
    values = {key: value for key, value in jsonDict.get("parameters", {}).items() if value is not None}
    try:
        return ExchangerParameters(jsonDict["type"], hot=parseSideParameters(jsonDict.get("hot", {})),
                                   cold=parseSideParameters(jsonDict.get("cold", {})), **values)
    except TypeError as error:
        raise ConfigurationError(f"Invalid heat exchanger parameters: {error}") from error
