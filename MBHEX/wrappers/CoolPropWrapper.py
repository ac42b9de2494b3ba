# -*- coding: utf-8 -*-
"""
Created on Mon Oct  5 09:12:44 2026

@author: MBHEX
"""
from enum import StrEnum
import logging
import numpy as np
import CoolProp as CP

class BackEnd(StrEnum):
    HEOS = "HEOS"
    TTSEHEOS = "TTSE&HEOS"
    BICUBICHEOS = "BICUBIC&HEOS"
    REFPROP = "REFPROP"
    INCOMP = "INCOMP"
    INCOMPRESSIBLE = "IncompressibleBackend"

# CoolProp input pairs keyed by the order in which the values are passed
INPUT_PAIRS = {"HP": CP.HmassP_INPUTS,
               "PT": CP.PT_INPUTS,
               "PQ": CP.PQ_INPUTS}

class AbstractStateWrapper():
    """
    Wrapper for CoolProp AbstractState class. Every calculate method updates the state with the
    given input pair and returns a single output.
    """
    def __init__(self, backEnd: str, fluid: str, massFraction: float=1.0):
        self.logger = logging.getLogger("AbstractStateWrapper")
        self.name = fluid
        self.backEnd = backEnd
        self.abstractState = CP.AbstractState(backEnd, fluid)
        self.massFractions = {fluid: massFraction}
        if massFraction < 1.0: self.setMassFraction(massFraction)

    def isIncompressible(self):
        return self.backEnd in (BackEnd.INCOMP, BackEnd.INCOMPRESSIBLE)

    def setMassFraction(self, massFraction):
        """
        CoolProp wrapper method to set the mass fraction of an incompressible solution

        Parameters
        ----------
        massFraction : float
            Fraction of the solution according to its mass.

        Returns
        -------
        None.

        """
        self.massFractions = {self.name: massFraction, 'Water': 1.0 - massFraction}
        self.abstractState.set_mass_fractions([massFraction])

    def calculateCriticalPressure(self):
        """
        CoolProp wrapper method to calculate the critical pressure of the fluid. Incompressible
        fluids have no critical point, so infinity is returned for them.

        Returns
        -------
        criticalPressure : float
            Critical pressure of the fluid in Pa.

        """
        if self.isIncompressible():
            return np.inf
        try:
            return self.abstractState.p_critical()
        except ValueError:
            self.logger.info("Could not find critical pressure for %s", self.name,
                             extra={"methodname": self.calculateCriticalPressure.__name__})
            return np.inf

    def _update(self, inputPair, value1, value2):
        self.abstractState.update(inputPair, value1, value2)
        return self.abstractState

    def calculateTemperature(self, inputPair, value1, value2):
        """
        CoolProp wrapper method to calculate the temperature of the fluid

        Parameters
        ----------
        inputPair : int
            CoolProp input pair constant (see INPUT_PAIRS).
        value1 : float
            first value of the input pair.
        value2 : float
            second value of the input pair.

        Returns
        -------
        float
            temperature of the state in K

        """
        return self._update(inputPair, value1, value2).T()

    def calculateEnthalpy(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).hmass()

    def calculateEntropy(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).smass()

    def calculateDensity(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).rhomass()

    def calculateViscosity(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).viscosity()

    def calculateConductivity(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).conductivity()

    def calculateHeatCapacity(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).cpmass()

    def calculateQuality(self, inputPair, value1, value2):
        """
        CoolProp wrapper method to calculate the vapor quality. CoolProp returns -1 outside of
        the two-phase dome.

        Returns
        -------
        float
            vapor quality of the state, unitless

        """
        return self._update(inputPair, value1, value2).Q()

    def calculateSurfaceTension(self, inputPair, value1, value2):
        return self._update(inputPair, value1, value2).surface_tension()
