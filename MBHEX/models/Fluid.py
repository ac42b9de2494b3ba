# -*- coding: utf-8 -*-
"""
Created on Mon Oct  5 10:02:17 2026

@author: MBHEX
"""
from enum import StrEnum
import numpy as np
from scipy.integrate import simpson
from MBHEX.wrappers.CoolPropWrapper import AbstractStateWrapper, INPUT_PAIRS

class ZoneType(StrEnum):
    """
    Phase regime of a stream inside a zone of the heat exchanger.
    """
    LIQUID = "liq"
    TWOPHASE = "tp"
    VAPOR = "vap"

class ThermoProps(StrEnum):
    """
    Thermodynamic properties pair enum. Used to determine which two thermodynamic
    properties will be used in calculation. Values are passed in the order of the name.
    """
    HP = 'enthalpy (J/kg) and pressure (Pa)'
    PQ = 'pressure (Pa) and vapor quality'
    PT = 'pressure (Pa) and temperature (K)'

class Fluid():
    """
    This class represents a fluid used in the library. It is used to calculate necessary
    properties of the fluid. Incompressible fluids (brines, thermal oils) only support
    single phase inputs.
    """
    def __init__(self, name: str, backEnd: str, massFraction: float=1.0):
        self.name = name
        self.backEnd = backEnd
        self.massFraction = massFraction
        self.abstractState = AbstractStateWrapper(backEnd, name, massFraction)
        self.isIncompressible = self.abstractState.isIncompressible()
        self.pressureCritical = self.abstractState.calculateCriticalPressure()

    def __repr__(self):
        return f"Fluid({self.name!r}, {self.backEnd!r}, massFraction={self.massFraction})"

    def _inputPair(self, properties: ThermoProps):
        """
        Converts a pair of thermodynamic properties into a CoolProp input pair

        Parameters
        ----------
        properties : ThermoProps
            Enum for pair of thermodynamic properties to be used in calculation.

        Raises
        ------
        NotImplementedError
            The pair is not supported, or saturation was requested for an incompressible fluid.

        Returns
        -------
        int
            CoolProp input pair.

        """
        match properties:
            case ThermoProps.HP | ThermoProps.PT:
                return INPUT_PAIRS[properties.name]
            case ThermoProps.PQ if not self.isIncompressible:
                return INPUT_PAIRS[properties.name]
            case _:
                raise NotImplementedError(f'Calculation from {properties} has not been implemented for {self.name}')

    def isPhaseChanging(self, pressure):
        return not self.isIncompressible and pressure < self.pressureCritical

    def calculateTemperature(self, properties: ThermoProps, variable1, variable2):
        """
        Calculates the temperature of the fluid in K.

        Parameters
        ----------
        properties : ThermoProps
            Enum for pair of thermodynamic properties to be used in calculation.
        variable1 : float
            First thermodynamic property value in the pair.
        variable2 : float
            Second thermodynamic property value in the pair.

        Returns
        -------
        temperature : float
            temperature of the fluid in K.

        """
        return self.abstractState.calculateTemperature(self._inputPair(properties), variable1, variable2)

    def calculateEnthalpy(self, properties: ThermoProps, variable1, variable2):
        """
        Calculates the enthalpy of the fluid in J/kg.
        """
        return self.abstractState.calculateEnthalpy(self._inputPair(properties), variable1, variable2)

    def calculateEntropy(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateEntropy(self._inputPair(properties), variable1, variable2)

    def calculateDensity(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateDensity(self._inputPair(properties), variable1, variable2)

    def calculateViscosity(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateViscosity(self._inputPair(properties), variable1, variable2)

    def calculateConductivity(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateConductivity(self._inputPair(properties), variable1, variable2)

    def calculateHeatCapacity(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateHeatCapacity(self._inputPair(properties), variable1, variable2)

    def calculatePrandtl(self, properties: ThermoProps, variable1, variable2):
        """
        Calculates the Prandtl number of the fluid from its heat capacity, viscosity and
        conductivity at the given state.
        """
        return self.calculateHeatCapacity(properties, variable1, variable2)\
            *self.calculateViscosity(properties, variable1, variable2)\
                /self.calculateConductivity(properties, variable1, variable2)

    def calculateQuality(self, properties: ThermoProps, variable1, variable2):
        """
        Calculates the vapor quality of the fluid. Incompressible fluids are always liquid.
        """
        if self.isIncompressible:
            return 0.0
        return self.abstractState.calculateQuality(self._inputPair(properties), variable1, variable2)

    def calculateSurfaceTension(self, properties: ThermoProps, variable1, variable2):
        return self.abstractState.calculateSurfaceTension(self._inputPair(properties), variable1, variable2)

    def calculateTemperatureAveraged(self, method, pressure, temperature1, temperature2):
        """
        Averages a property over a temperature interval at constant pressure. Used for
        streams given by temperature, whose properties are not evaluated from enthalpy.

        Parameters
        ----------
        method : callable
            one of the calculate methods of this class, called with ThermoProps.PT.
        pressure : float
            pressure of the fluid in Pa.
        temperature1 : float
            first temperature of the interval in K.
        temperature2 : float
            second temperature of the interval in K.

        Returns
        -------
        float
            property averaged over the interval.

        """
        if abs(temperature2 - temperature1) < 1e-6:
            return method(ThermoProps.PT, pressure, 0.5*(temperature1 + temperature2))
        temperatures = np.linspace(temperature1, temperature2, 3)
        values = [method(ThermoProps.PT, pressure, temperature) for temperature in temperatures]
        return simpson(values, x=temperatures)/(temperature2 - temperature1)

    def calculateSaturationProps(self, pressure):
        """
        Calculates the saturated liquid and vapor properties at the given pressure

        Parameters
        ----------
        pressure : float
            pressure in Pa.

        Returns
        -------
        SaturationProps or None
            saturation properties, None if the fluid cannot change phase at this pressure.

        """
        if not self.isPhaseChanging(pressure):
            return None
        return SaturationProps(self, pressure)

class SaturationProps():
    """
    Saturated liquid and vapor properties of a fluid at one pressure. Computed once per stream
    and per solver call.
    """
    def __init__(self, fluid: Fluid, pressure: float):
        self.pressure = pressure
        self.enthalpyLiquid = fluid.calculateEnthalpy(ThermoProps.PQ, pressure, 0.0)
        self.enthalpyVapor = fluid.calculateEnthalpy(ThermoProps.PQ, pressure, 1.0)
        self.tempBubble = fluid.calculateTemperature(ThermoProps.PQ, pressure, 0.0)
        self.tempDew = fluid.calculateTemperature(ThermoProps.PQ, pressure, 1.0)
        self.densityLiquid = fluid.calculateDensity(ThermoProps.PQ, pressure, 0.0)
        self.densityVapor = fluid.calculateDensity(ThermoProps.PQ, pressure, 1.0)
        self.viscosityLiquid = fluid.calculateViscosity(ThermoProps.PQ, pressure, 0.0)
        self.viscosityVapor = fluid.calculateViscosity(ThermoProps.PQ, pressure, 1.0)
        self.conductivityLiquid = fluid.calculateConductivity(ThermoProps.PQ, pressure, 0.0)
        self.heatCapacityLiquid = fluid.calculateHeatCapacity(ThermoProps.PQ, pressure, 0.0)
        self.prandtlLiquid = self.heatCapacityLiquid*self.viscosityLiquid/self.conductivityLiquid
        self._fluid = fluid

    @property
    def surfaceTension(self):
        return self._fluid.calculateSurfaceTension(ThermoProps.PQ, self.pressure, 0.0)

    @property
    def enthalpyVaporization(self):
        return self.enthalpyVapor - self.enthalpyLiquid

    def calculateQuality(self, enthalpy):
        """
        Vapor quality from enthalpy, clipped to [0, 1].
        """
        return float(np.clip((enthalpy - self.enthalpyLiquid)/self.enthalpyVaporization, 0.0, 1.0))

    def classifyEnthalpy(self, enthalpy):
        if enthalpy < self.enthalpyLiquid:
            return ZoneType.LIQUID
        if enthalpy > self.enthalpyVapor:
            return ZoneType.VAPOR
        return ZoneType.TWOPHASE
