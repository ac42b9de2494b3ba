# -*- coding: utf-8 -*-
"""
Created on Thu Oct  8 09:27:55 2026

@author: MBHEX
"""
import logging
import numpy as np
from scipy.optimize import brentq
from MBHEX.models.Correlations import calculateLogMeanTempDiff
from MBHEX.models.Fluid import ThermoProps
from MBHEX.models.Parameters import ConfigurationError, ExchangerParameters, InputMode, Side, StreamState

class StreamConditions():
    """
    State of a stream derived once per solver call from its StreamState: supply enthalpy and
    temperature, and saturation properties when the stream can change phase.
    """
    def __init__(self, stream: StreamState):
        self.fluid = stream.fluid
        self.pressure = stream.pressure
        self.massFlow = stream.massFlow
        self.inputMode = stream.inputMode
        match stream.inputMode:
            case InputMode.ENTHALPY:
                self.enthalpySupply = stream.inletValue
                self.tempSupply = self.calculateTemperature(stream.inletValue)
                self.saturation = self.fluid.calculateSaturationProps(self.pressure)
            case InputMode.TEMPERATURE:
                self.tempSupply = stream.inletValue
                self.enthalpySupply = self.calculateEnthalpy(stream.inletValue)
                self.saturation = None
            case _:
                raise ConfigurationError(f"Unsupported input mode {stream.inputMode}")

    def calculateTemperature(self, enthalpy):
        return self.fluid.calculateTemperature(ThermoProps.HP, enthalpy, self.pressure)

    def calculateEnthalpy(self, temperature):
        return self.fluid.calculateEnthalpy(ThermoProps.PT, self.pressure, temperature)

    def calculateEntropy(self, enthalpy):
        return self.fluid.calculateEntropy(ThermoProps.HP, enthalpy, self.pressure)

    def phaseBoundaries(self, enthalpyLow, enthalpyHigh, numTwoPhaseCells, eps=1e-3):
        """
        Enthalpies bounding the zones of this stream between enthalpyLow and enthalpyHigh:
        both ends, the saturation enthalpies lying strictly inside, and the equal enthalpy
        subdivisions of the two-phase range.

        Parameters
        ----------
        enthalpyLow : float
            lowest enthalpy of the stream in J/kg.
        enthalpyHigh : float
            highest enthalpy of the stream in J/kg.
        numTwoPhaseCells : int
            number of cells in the two-phase range.
        eps : float, optional
            minimum distance to the ends for an interior boundary. The default is 1e-3.

        Returns
        -------
        list
            ascending enthalpies in J/kg.

        """
        boundaries = [enthalpyLow, enthalpyHigh]
        if self.saturation is None:
            return boundaries
        twoPhaseLow = max(enthalpyLow, self.saturation.enthalpyLiquid)
        twoPhaseHigh = min(enthalpyHigh, self.saturation.enthalpyVapor)
        if twoPhaseHigh - twoPhaseLow > eps:
            boundaries.extend(np.linspace(twoPhaseLow, twoPhaseHigh, max(numTwoPhaseCells, 1) + 1))
        return sorted({enthalpy for enthalpy in boundaries
                       if enthalpy in (enthalpyLow, enthalpyHigh) or enthalpyLow + eps < enthalpy < enthalpyHigh - eps})

class Profile():
    """
    Temperature and enthalpy profile of both streams for one heat duty. Vectors are indexed
    from the end where the hot stream leaves and the cold stream enters, so both enthalpy
    vectors are ascending. Cell j lies between boundaries j and j+1.
    """
    def __init__(self, heatTransferred, fractions, enthalpyHot, enthalpyCold, tempHot, tempCold,
                 massFlowHot, massFlowCold, boundariesHot, boundariesCold):
        self.heatTransferred = heatTransferred
        self.fractions = fractions
        self.heatVector = np.diff(fractions)*heatTransferred
        self.enthalpyHot = enthalpyHot
        self.enthalpyCold = enthalpyCold
        self.tempHot = tempHot
        self.tempCold = tempCold
        self.massFlowHot = massFlowHot
        self.massFlowCold = massFlowCold
        self.boundariesHot = boundariesHot
        self.boundariesCold = boundariesCold
        self.tempDiff = tempHot - tempCold
        self.pinchIndex = int(np.argmin(self.tempDiff))
        self.pinch = float(self.tempDiff[self.pinchIndex])

    @property
    def numCells(self):
        return len(self.fractions) - 1

    @property
    def enthalpyOutHot(self):
        return self.enthalpyHot[0]

    @property
    def enthalpyOutCold(self):
        return self.enthalpyCold[-1]

    @property
    def tempOutHot(self):
        return self.tempHot[0]

    @property
    def tempOutCold(self):
        return self.tempCold[-1]

    def logMeanTempDiffs(self):
        return np.array([calculateLogMeanTempDiff(self.tempHot[j + 1], self.tempHot[j], self.tempCold[j],
                                                  self.tempCold[j + 1]) for j in range(self.numCells)])

    def energyImbalance(self):
        """
        Largest difference between the heat released by the hot stream and the heat received by
        the cold stream in a cell, in W.
        """
        return float(np.max(np.abs(self.massFlowHot*np.diff(self.enthalpyHot)
                                   - self.massFlowCold*np.diff(self.enthalpyCold))))

class ProfileBuilder():
    """
    Builds counter-flow profiles of two streams for trial heat duties. The zone boundaries of
    both streams are merged on a common cumulative heat fraction axis, so every cell transfers
    the same heat on both sides.
    """
    def __init__(self, hotStream: StreamState, coldStream: StreamState, params: ExchangerParameters):
        self.logger = logging.getLogger("ProfileBuilder")
        self.params = params
        self.hot = StreamConditions(hotStream)
        self.cold = StreamConditions(coldStream)

    def stream(self, side: Side) -> StreamConditions:
        return self.hot if side is Side.HOT else self.cold

    @property
    def supplyTempDiff(self):
        return self.hot.tempSupply - self.cold.tempSupply

    def buildEnthalpyLists(self, heatTransferred):
        """
        Builds lists of enthalpies for both hot and cold fluids on the merged cell boundaries

        Parameters
        ----------
        heatTransferred : float
            trial heat duty in W.

        Returns
        -------
        fractions : np.ndarray
            cumulative heat fraction at each boundary, from 0 to 1.
        enthalpyHot : np.ndarray
            hot stream enthalpies at each boundary in J/kg.
        enthalpyCold : np.ndarray
            cold stream enthalpies at each boundary in J/kg.
        boundariesHot, boundariesCold : list
            zone boundary enthalpies of each stream before merging.

        """
        if heatTransferred <= 0.0:
            fractions = np.array([0.0, 1.0])
            return (fractions, np.full(2, self.hot.enthalpySupply), np.full(2, self.cold.enthalpySupply),
                    [self.hot.enthalpySupply]*2, [self.cold.enthalpySupply]*2)
        enthalpyOutHot = self.hot.enthalpySupply - heatTransferred/self.hot.massFlow
        enthalpyOutCold = self.cold.enthalpySupply + heatTransferred/self.cold.massFlow
        numTwoPhaseCells = self.params.numTwoPhaseCells
        boundariesHot = self.hot.phaseBoundaries(enthalpyOutHot, self.hot.enthalpySupply, numTwoPhaseCells)
        boundariesCold = self.cold.phaseBoundaries(self.cold.enthalpySupply, enthalpyOutCold, numTwoPhaseCells)
        fractionsHot = self.hot.massFlow*(np.array(boundariesHot) - enthalpyOutHot)/heatTransferred
        fractionsCold = self.cold.massFlow*(np.array(boundariesCold) - self.cold.enthalpySupply)/heatTransferred
        merged = np.sort(np.clip(np.concatenate([fractionsHot, fractionsCold]), 0.0, 1.0))
        fractions = merged[np.concatenate([[True], np.diff(merged) > 1e-9])]
        fractions[0] = 0.0
        if fractions[-1] < 1.0 - 1e-9:
            fractions = np.append(fractions, 1.0)
        fractions[-1] = 1.0
        enthalpyHot = enthalpyOutHot + fractions*heatTransferred/self.hot.massFlow
        enthalpyCold = self.cold.enthalpySupply + fractions*heatTransferred/self.cold.massFlow
        self.logger.debug("boundaries hot: %s, cold: %s, merged fractions: %s", boundariesHot, boundariesCold,
                          fractions, extra={"methodname": self.buildEnthalpyLists.__name__})
        return fractions, enthalpyHot, enthalpyCold, boundariesHot, boundariesCold

    def buildProfile(self, heatTransferred) -> Profile:
        """
        Builds the profile of both streams for a heat duty

        Parameters
        ----------
        heatTransferred : float
            trial heat duty in W.

        Returns
        -------
        Profile
            temperature and enthalpy profile.

        """
        fractions, enthalpyHot, enthalpyCold, boundariesHot, boundariesCold = self.buildEnthalpyLists(heatTransferred)
        tempHot = np.array([self.hot.calculateTemperature(enthalpy) for enthalpy in enthalpyHot])
        tempCold = np.array([self.cold.calculateTemperature(enthalpy) for enthalpy in enthalpyCold])
        profile = Profile(heatTransferred, fractions, enthalpyHot, enthalpyCold, tempHot, tempCold,
                          self.hot.massFlow, self.cold.massFlow, boundariesHot, boundariesCold)
        self.logger.debug("Q: %g, pinch: %g at boundary %d", heatTransferred, profile.pinch, profile.pinchIndex,
                          extra={"methodname": self.buildProfile.__name__})
        return profile

    def calculateMaximumHeatTransfer(self):
        """
        Finds the largest heat duty the streams can exchange: the smaller of the duties taking
        each stream to the supply temperature of the other one, reduced until the profile has
        no internal temperature cross.

        Returns
        -------
        qMax : float
            maximum heat duty in W.
        profile : Profile
            profile at the maximum heat duty.

        """
        qMaxHot = self.hot.massFlow*(self.hot.enthalpySupply - self.hot.calculateEnthalpy(self.cold.tempSupply))
        qMaxCold = self.cold.massFlow*(self.cold.calculateEnthalpy(self.hot.tempSupply) - self.cold.enthalpySupply)
        qMax = max(min(qMaxHot, qMaxCold), 0.0)
        profile = self.buildProfile(qMax)
        if profile.pinch < -1e-9:
            self.logger.debug("internal pinch at boundary %d for Q = %g", profile.pinchIndex, qMax,
                              extra={"methodname": self.calculateMaximumHeatTransfer.__name__})
            qMax = brentq(lambda heat: self.buildProfile(heat).pinch, 0.0, qMax, xtol=1e-8)
            profile = self.buildProfile(qMax)
        self.logger.debug("qMaxHot: %g, qMaxCold: %g, qMax: %g", qMaxHot, qMaxCold, qMax,
                          extra={"methodname": self.calculateMaximumHeatTransfer.__name__})
        return qMax, profile
