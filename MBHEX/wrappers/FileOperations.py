# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 11:02:53 2026

@author: MBHEX
"""
from json import dumps, load
from MBHEX.models.Orientation import calculateSupplyTemperature
from MBHEX.wrappers.JsonParser import parseExchangerParameters, parseStream
from MBHEX.calculations.Conversions import TemperatureConversions, PressureConversions, MassFlowConversions

def output_folder():
    return "Outputs/"

def _convertValue(convert, value):
    if isinstance(value, list):
        return [convert(item) for item in value]
    return convert(value)

def createCaseOutput(hotStream, coldStream, result):
    """
    Flat record of one solved case, in SI units, ready for createJsonFile
    """
    output = {"pressureHot": hotStream.pressure,
              "pressureCold": coldStream.pressure,
              "massFlowHot": hotStream.massFlow,
              "massFlowCold": coldStream.massFlow,
              "tempInHot": calculateSupplyTemperature(hotStream),
              "tempInCold": calculateSupplyTemperature(coldStream)}
    output.update({key: value for key, value in result.toDict().items() if key != "trace"})
    return output

def createJsonFile(jsonData, testName):
    """
    Writes the results of a test to output_folder(). Pressures are written in bar,
    temperatures in C and mass flows in kg/h.

    Parameters
    ----------
    jsonData : dict
        results keyed by test name, each one a list of case records.
    testName : str
        name of the test, used as file name.

    Returns
    -------
    None.

    """
    tc = TemperatureConversions()
    mfc = MassFlowConversions()
    pc = PressureConversions()
    with open(f"{output_folder()}{testName}.json", "w") as file:
        for singlePoint in jsonData[testName]:
            for pointData in singlePoint.keys():
                if "pressure" in pointData:
                    singlePoint[pointData] = _convertValue(
                        lambda value: pc.convertPressure(pc.Unit.PA, pc.Unit.BAR, value), singlePoint[pointData])
                if "massFlow" in pointData:
                    singlePoint[pointData] = _convertValue(
                        lambda value: mfc.convertMassFlow(mfc.Unit.KGS, mfc.Unit.KGH, value), singlePoint[pointData])
                if "temp" in pointData:
                    singlePoint[pointData] = _convertValue(
                        lambda value: tc.convertTemperature(tc.Unit.K, tc.Unit.C, value), singlePoint[pointData])
        file.write(dumps(jsonData, indent=4))

def getValuesFromInputFile(filepath):
    """
    Reads every case of a JSON input file

    Returns
    -------
    list of tuple
        (testName, hotStream, coldStream, params) of each case.

    """
    with open(filepath) as file:
        jsonData = load(file)
    cases = []
    for jsonInput in jsonData["inputs"]:
        cases.append((jsonInput["testName"], parseStream(jsonInput["hot"]), parseStream(jsonInput["cold"]),
                      parseExchangerParameters(jsonInput["HEX"])))
    return cases
