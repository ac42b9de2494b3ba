'''This module converts the values of case files between their units and the SI units used
   by the heat exchanger models'''
from enum import Enum

class TemperatureConversions():
    """
    Class for all temperature unit conversions
    """

    class Unit(Enum):
        """
        Temperature units enum, with the absolute zero of each unit
        """
        K = ("Kelvin", 0.0)
        C = ("Celsius", -273.15)
        F = ("Fahrenheit", -459.67)

        def __new__(cls, value, absoluteZero):
            obj = object.__new__(cls)
            obj._value_ = value
            obj.absoluteZero = absoluteZero
            return obj

    def __init__(self):
        self.scaleFactors = {self.Unit.K: 1.0, self.Unit.C: 1.0, self.Unit.F: 5.0/9.0}

    def toKelvin(self, unit: Unit, temperature):
        """
        Converts a temperature to K

        Raises
        ------
        ValueError
            Temperature is below absolute zero.

        """
        if temperature < unit.absoluteZero:
            raise ValueError(f"Temperature in {unit.value} cannot be lower than {unit.absoluteZero}")
        return (temperature - unit.absoluteZero)*self.scaleFactors[unit]

    def convertTemperature(self, unitFrom: Unit, unitTo: Unit, temperature):
        """
        Convert temperature among Celsius, Kelvin, and Fahrenheit

        Parameters
        ----------
        unitFrom : Unit
            temperature unit you are converting from.
        unitTo : Unit
            temperature unit you are converting to.
        temperature : float
            temperature to be converted.

        Returns
        -------
        float
            temperature in the unit you are converting to.

        """
        return self.toKelvin(unitFrom, temperature)/self.scaleFactors[unitTo] + unitTo.absoluteZero

class PressureConversions():
    """
    class for all pressure unit conversions
    """
    class Unit(Enum):
        """
        Pressure units enum, with the value of one unit in Pa
        """
        PA = ("Pascal", 1.0)
        KPA = ("kilopascal", 1e3)
        BAR = ("bar", 1e5)
        PSI = ("psi", 6894.757293)

        def __new__(cls, value, pascals):
            obj = object.__new__(cls)
            obj._value_ = value
            obj.pascals = pascals
            return obj

    def convertPressure(self, unitFrom: Unit, unitTo: Unit, pressure):
        """
        Convert pressure among Pascals (PA), kilopascals (KPA), bar (BAR), and PSI

        Parameters
        ----------
        unitFrom : Unit
            pressure unit you are converting from.
        unitTo : Unit
            pressure unit you are converting to.
        pressure : float
            pressure in the unit you are converting from.

        Returns
        -------
        pressure
            pressure in the unit you are converting to.

        """
        return pressure*unitFrom.pascals/unitTo.pascals

class MassFlowConversions():
    """
    class for all mass flow unit conversions
    """

    class Unit(Enum):
        """
        Mass flow units enum, with the value of one unit in kg/s
        """
        KGS = ("kgs per second", 1.0)
        KGH = ("kgs per hour", 1/3600)
        LBH = ("pounds per hour", 0.45359237/3600)
        LBM = ("pounds per minute", 0.45359237/60)

        def __new__(cls, units, kgPerSecond):
            obj = object.__new__(cls)
            obj._value_ = units
            obj.kgPerSecond = kgPerSecond
            return obj

    def convertMassFlow(self, unitFrom: Unit, unitTo: Unit, massFlow):
        """
        Convert mass flow among kilograms per second (KGS), kilograms per hour (KGH),
        pounds per hour (LBH), and pounds per minute (LBM)

        Parameters
        ----------
        unitFrom : Unit
            mass flow unit you are converting from.
        unitTo : Unit
            mass flow unit you are converting to.
        massFlow : float
            mass flow to be converted.

        Returns
        -------
        float
            mass flow in the unit you are converting to.

        """
        return massFlow*unitFrom.kgPerSecond/unitTo.kgPerSecond

def parseUnit(unitClass, name):
    """
    Finds a unit by its enum name (BAR) or its value (bar), case insensitive

    Raises
    ------
    ValueError
        unknown unit.

    """
    for unit in unitClass:
        if name.upper() == unit.name or name.lower() == unit.value.lower():
            return unit
    raise ValueError(f"Unknown unit '{name}'. Expected one of {[unit.name for unit in unitClass]}")
