# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:05:44 2026

@author: MBHEX
"""
from copy import copy
from enum import IntEnum
import numpy as np
from MBHEX.models.Fluid import ZoneType
from MBHEX.models.Parameters import Side

class SolverFlag(IntEnum):
    """
    Outcome of a solver call. Positive values are usable results, negative values say which
    constraint could not be met.
    """
    CONVERGED = 1
    DUTY_LIMITED = 2
    NO_TRANSFER = 3
    UNMATCHED = -1
    QMAX_UNPINCHED = -2
    NON_PHYSICAL = -3

class TemperatureEntropyTrace():
    """
    Temperatures and entropies of both streams on the zone boundaries, against the heat
    fraction (fractions) and against the volume fraction of the exchanger (fractionsGeometric).
    """
    def __init__(self, tempHot, tempCold, entropyHot, entropyCold, fractions, fractionsGeometric):
        self.tempHot = tempHot
        self.tempCold = tempCold
        self.entropyHot = entropyHot
        self.entropyCold = entropyCold
        self.fractions = fractions
        self.fractionsGeometric = fractionsGeometric

    @classmethod
    def fromResult(cls, result):
        fractionsGeometric = np.concatenate([[0.0], np.cumsum([zone.volumeShare for zone in result.zones])])
        return cls(result.tempHot, result.tempCold, result.entropyHot, result.entropyCold,
                   result.fractions, fractionsGeometric)

    def toDict(self):
        return {"tempHot": list(self.tempHot), "tempCold": list(self.tempCold),
                "entropyHot": list(self.entropyHot), "entropyCold": list(self.entropyCold),
                "fractions": list(self.fractions), "fractionsGeometric": list(self.fractionsGeometric)}

class SolverResult():
    """
    Profile summary shared by every model type. Boundary vectors run from the end where the
    hot stream leaves and the cold stream enters (index 0) to the other end.

    Attributes
    ----------
    modelType : ModelType
        closure law used.
    flag : SolverFlag
        outcome of the call.
    heatTransferred : float
        heat duty in W.
    heatTransferredMax : float
        maximum heat duty in W.
    fractions : np.ndarray
        cumulative heat fraction on the zone boundaries.
    enthalpyHot, enthalpyCold : np.ndarray
        enthalpies on the zone boundaries in J/kg.
    tempHot, tempCold : np.ndarray
        temperatures on the zone boundaries in K.
    entropyHot, entropyCold : np.ndarray
        entropies on the zone boundaries in J/kg/K, NaN when the trace is not generated.
    zones : list of Zone
        zones between the boundaries.
    pinch : float
        smallest temperature difference between the streams in K.
    massHot, massCold : float
        mass of each stream in the exchanger in kg.
    diagnostics : list of str
        non-convergence messages.
    elapsedTime : float
        duration of the call in s.
    trace : TemperatureEntropyTrace
        None when the trace is not generated.
    """
    def __init__(self, modelType, flag, profile, zones, heatTransferredMax):
        self.modelType = modelType
        self.flag = flag
        self.heatTransferred = profile.heatTransferred
        self.heatTransferredMax = heatTransferredMax
        self.fractions = profile.fractions
        self.enthalpyHot = profile.enthalpyHot
        self.enthalpyCold = profile.enthalpyCold
        self.tempHot = profile.tempHot
        self.tempCold = profile.tempCold
        self.entropyHot = np.full(len(profile.fractions), np.nan)
        self.entropyCold = np.full(len(profile.fractions), np.nan)
        self.zones = zones
        self.pinch = profile.pinch
        self.massHot = 0.0
        self.massCold = 0.0
        self.diagnostics = [message for zone in zones for message in zone.diagnostics]
        self.elapsedTime = None
        self.trace = None
        self.isReversed = False

    def __repr__(self):
        return (f"{type(self).__name__}({self.modelType}, flag={self.flag.name}, "
                f"Q={self.heatTransferred:g}, pinch={self.pinch:g})")

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

    @property
    def tempDiff(self):
        return self.tempHot - self.tempCold

    @property
    def heatVector(self):
        return np.array([zone.heatTransferred for zone in self.zones])

    def zoneVector(self, attribute, side: Side):
        """
        Values of a per stream zone attribute (regime, heatTransferCoeff, area, mass...) over
        all zones.
        """
        values = [getattr(zone, attribute)[side] for zone in self.zones]
        if attribute == "regime":
            return values
        return np.array(values)

    def swapRoles(self):
        """
        Returns a copy with hot and cold exchanged and the boundary vectors reversed. The heat
        fractions are rebuilt from the new hot enthalpy vector.
        """
        swapped = copy(self)
        swapped.enthalpyHot, swapped.enthalpyCold = self.enthalpyCold[::-1].copy(), self.enthalpyHot[::-1].copy()
        swapped.tempHot, swapped.tempCold = self.tempCold[::-1].copy(), self.tempHot[::-1].copy()
        swapped.entropyHot, swapped.entropyCold = self.entropyCold[::-1].copy(), self.entropyHot[::-1].copy()
        enthalpySpan = swapped.enthalpyHot[-1] - swapped.enthalpyHot[0]
        if self.heatTransferred > 0.0 and enthalpySpan != 0.0:
            swapped.fractions = (swapped.enthalpyHot - swapped.enthalpyHot[0])/enthalpySpan
        else:
            swapped.fractions = 1.0 - self.fractions[::-1]
        swapped.zones = [zone.swapRoles() for zone in reversed(self.zones)]
        swapped.massHot, swapped.massCold = self.massCold, self.massHot
        swapped.diagnostics = list(self.diagnostics)
        swapped.isReversed = not self.isReversed
        if self.trace is not None:
            swapped.trace = TemperatureEntropyTrace.fromResult(swapped)
        return swapped

    def outputList(self):
        """
            Return a list of parameters for this component for further output

            It is a list of tuples, and each tuple is formed of items:
                [0] Description of value
                [1] Units of value
                [2] The value itself
        """
        outputList = [('Model type', '-', str(self.modelType)),
                      ('Solver flag', '-', int(self.flag)),
                      ('Q Total', 'W', self.heatTransferred),
                      ('Q Max', 'W', self.heatTransferredMax),
                      ('Pinch', 'K', self.pinch),
                      ('Outlet Hot stream enthalpy', 'J/kg', self.enthalpyOutHot),
                      ('Outlet Cold stream enthalpy', 'J/kg', self.enthalpyOutCold),
                      ('Outlet Hot stream temp', 'K', self.tempOutHot),
                      ('Outlet Cold stream temp', 'K', self.tempOutCold),
                      ('Charge Total Hot', 'kg', self.massHot),
                      ('Charge Total Cold', 'kg', self.massCold),
                      ('Number of zones', '-', len(self.zones)),
                      ('Elapsed time', 's', self.elapsedTime)]
        for side in Side:
            for regime in ZoneType:
                heat = sum(zone.heatTransferred for zone in self.zones if zone.regime[side] is regime)
                outputList.append((f"Q {regime} {side}", "W", heat))
        return outputList

    def toDict(self):
        """
        Result as JSON-ready data, in SI units.
        """
        data = {"modelType": str(self.modelType),
                "flag": int(self.flag),
                "heatTransferred": float(self.heatTransferred),
                "heatTransferredMax": float(self.heatTransferredMax),
                "pinch": float(self.pinch),
                "enthalpyOutHot": float(self.enthalpyOutHot),
                "enthalpyOutCold": float(self.enthalpyOutCold),
                "tempOutHot": float(self.tempOutHot),
                "tempOutCold": float(self.tempOutCold),
                "massHot": float(self.massHot),
                "massCold": float(self.massCold),
                "fractions": self.fractions.tolist(),
                "enthalpyHot": self.enthalpyHot.tolist(),
                "enthalpyCold": self.enthalpyCold.tolist(),
                "tempHot": self.tempHot.tolist(),
                "tempCold": self.tempCold.tolist(),
                "heatVector": self.heatVector.tolist(),
                "regimeHot": [str(regime) for regime in self.zoneVector("regime", Side.HOT)],
                "regimeCold": [str(regime) for regime in self.zoneVector("regime", Side.COLD)],
                "isReversed": self.isReversed,
                "elapsedTime": self.elapsedTime,
                "diagnostics": list(self.diagnostics)}
        if self.trace is not None:
            data["trace"] = self.trace.toDict()
        return data

class PinchResult(SolverResult):
    """
    Result of the fixed pinch model.
    """
    def __init__(self, modelType, flag, profile, zones, heatTransferredMax, targetPinch):
        super().__init__(modelType, flag, profile, zones, heatTransferredMax)
        self.targetPinch = targetPinch
        self.residualPinch = abs(1 - profile.pinch/targetPinch) if targetPinch else np.nan

    def outputList(self):
        return super().outputList() + [('Target pinch', 'K', self.targetPinch),
                                       ('Pinch residual', '-', self.residualPinch)]

    def toDict(self):
        return {**super().toDict(), "targetPinch": self.targetPinch, "residualPinch": float(self.residualPinch)}

class EffectivenessResult(SolverResult):
    """
    Result of the constant and polynomial effectiveness models.
    """
    def __init__(self, modelType, flag, profile, zones, heatTransferredMax, effectiveness, pinchMax):
        super().__init__(modelType, flag, profile, zones, heatTransferredMax)
        self.effectiveness = effectiveness
        self.pinchMax = pinchMax

    def outputList(self):
        return super().outputList() + [('Effectiveness', '-', self.effectiveness),
                                       ('Pinch at Q Max', 'K', self.pinchMax)]

    def toDict(self):
        return {**super().toDict(), "effectiveness": float(self.effectiveness), "pinchMax": float(self.pinchMax)}

class ConductanceResult(SolverResult):
    """
    Result of the convective coefficient models, with the required areas and the mean
    coefficient of every regime on each side.
    """
    def __init__(self, modelType, flag, profile, zones, heatTransferredMax, areaTotalHot, areaTotalCold,
                 reportMeanCoefficients=False):
        super().__init__(modelType, flag, profile, zones, heatTransferredMax)
        self.areaTotalHot = areaTotalHot
        self.areaTotalCold = areaTotalCold
        self.areaRequiredHot = float(np.nansum(self.zoneVector("area", Side.HOT))) if zones else 0.0
        self.areaRequiredCold = float(np.nansum(self.zoneVector("area", Side.COLD))) if zones else 0.0
        self.areaResidual = 1 - self.areaRequiredHot/areaTotalHot
        self.epsilonThermal = profile.heatTransferred/heatTransferredMax if heatTransferredMax > 0 else 0.0
        self.meanCoefficients = self.calculateMeanCoefficients() if reportMeanCoefficients else None

    def calculateMeanCoefficients(self):
        """
        Mean convective coefficient of each regime on each side, NaN for a regime that does not
        appear on that side.
        """
        means = {}
        for side in Side:
            means[side] = {}
            for regime in ZoneType:
                values = [zone.heatTransferCoeff[side] for zone in self.zones if zone.regime[side] is regime]
                means[side][regime] = float(np.mean(values)) if values else np.nan
        return means

    def swapRoles(self):
        swapped = super().swapRoles()
        swapped.areaTotalHot, swapped.areaTotalCold = self.areaTotalCold, self.areaTotalHot
        swapped.areaRequiredHot, swapped.areaRequiredCold = self.areaRequiredCold, self.areaRequiredHot
        if self.meanCoefficients is not None:
            swapped.meanCoefficients = {side: self.meanCoefficients[side.other] for side in Side}
        return swapped

    def outputList(self):
        outputList = super().outputList() + [('Required area Hot', 'm^2', self.areaRequiredHot),
                                             ('Required area Cold', 'm^2', self.areaRequiredCold),
                                             ('Area residual', '-', self.areaResidual),
                                             ('Thermal effectiveness', '-', self.epsilonThermal)]
        if self.meanCoefficients is not None:
            for side in Side:
                for regime in ZoneType:
                    outputList.append((f"{side} Mean HTC {regime}", "W/m^2-K", self.meanCoefficients[side][regime]))
        return outputList

    def toDict(self):
        data = {**super().toDict(), "areaRequiredHot": self.areaRequiredHot, "areaRequiredCold": self.areaRequiredCold,
                "areaResidual": float(self.areaResidual), "epsilonThermal": float(self.epsilonThermal),
                "heatTransferCoeffHot": self.zoneVector("heatTransferCoeff", Side.HOT).tolist(),
                "heatTransferCoeffCold": self.zoneVector("heatTransferCoeff", Side.COLD).tolist(),
                "areaHot": self.zoneVector("area", Side.HOT).tolist(),
                "areaCold": self.zoneVector("area", Side.COLD).tolist()}
        if self.meanCoefficients is not None:
            data["meanCoefficients"] = {str(side): {str(regime): value for regime, value in values.items()}
                                        for side, values in self.meanCoefficients.items()}
        return data
