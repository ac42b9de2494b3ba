# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 08:52:30 2026

@author: MBHEX
"""
import logging
from time import perf_counter
import numpy as np
from scipy.optimize import brentq
from MBHEX.models.Fluid import ThermoProps
from MBHEX.models.Orientation import normalizeOrientation, restoreOrientation
from MBHEX.models.Parameters import ConfigurationError, ExchangerParameters, InputMode, ModelType, Side,\
    StreamState, VoidFractionModel, clampEffectiveness
from MBHEX.models.Profile import ProfileBuilder
from MBHEX.models.Results import ConductanceResult, EffectivenessResult, PinchResult, SolverFlag,\
    SolverResult, TemperatureEntropyTrace
from MBHEX.models.VoidFraction import calculateZoneMass
from MBHEX.models.ZoneEvaluator import ConstantCoefficients, CorrelationCoefficients,\
    FlowDependentCoefficients, ZoneEvaluator

class HeatExchanger():
    r"""
    Counter-flow heat exchanger split into zones bounded by the phase changes of both streams.

                 hot supply  ->  ==========================  ->  hot exhaust
                                ||  zone | zone |  ...   ||
                cold exhaust <-  ==========================  <-  cold supply

    Each model type closes the problem with its own law for the heat duty: a fixed pinch, an
    effectiveness, or the area required by convective coefficients. Once the duty is known,
    the mass of both streams held in the heat exchanger is integrated zone by zone.

    Parameters
    ----------
    hotStream : StreamState
        supply state of the stream labelled hot.
    coldStream : StreamState
        supply state of the stream labelled cold.
    params : ExchangerParameters
        heat exchanger description.
    """
    def __init__(self, hotStream: StreamState, coldStream: StreamState, params: ExchangerParameters):
        self.type = params.modelType
        self.logger = logging.getLogger(str(self.type))
        self.hotStream = hotStream
        self.coldStream = coldStream
        self.params = params
        self.validateParameters()
        self.validateVoidFraction()

    def logLocalVars(self, funcName, localDict):
        """
        Logs local variables in methods that call this

        Parameters
        ----------
        funcName : string
            name of method/function whose variables are being logged.
        localDict : dict
            dict of local variables from method/function.

        Returns
        -------
        None.

        """
        for localKey, localVal in localDict.items():
            if localKey == "self":
                continue
            if isinstance(localVal, (str, list)):
                self.logger.debug("%s: %s", localKey, localVal, extra={"methodname": funcName})
            elif isinstance(localVal, (float, int, np.floating)):
                self.logger.debug("%s: %g", localKey, localVal or 0.0, extra={"methodname": funcName})

    def validateParameters(self):
        """
        Checks the parameters needed by the model type. Overridden by child classes.
        """

    def validateVoidFraction(self):
        """
        Hughmark needs the flow geometry of its side, whatever the phases met by the solve,
        unless alphaMass replaces the model.
        """
        for side in Side:
            sideParams = self.params.side(side)
            if sideParams.voidFraction is VoidFractionModel.HUGHMARK and sideParams.alphaMass is None\
                    and not sideParams.hasFlowGeometry():
                raise ConfigurationError(f"Hughmark void fraction on the {side} side requires diameterHydraulic, "
                                         "crossSection and numChannels")

    def calculate(self) -> SolverResult:
        """
        Calculates everything

        Returns
        -------
        SolverResult
            profile, duty, masses and status of the heat exchanger.

        """
        start = perf_counter()
        hotStream, coldStream, params, isReversed = normalizeOrientation(self.hotStream, self.coldStream, self.params)
        builder = ProfileBuilder(hotStream, coldStream, params)
        flag = self.checkViability(builder)
        if flag is None:
            result = self.solveDuty(builder, params)
        else:
            profile = builder.buildProfile(0.0)
            zones = self.createZoneEvaluator(builder, params).evaluateZones(profile)
            result = self.createResult(flag, profile, zones, 0.0, params)
        self.calculateMasses(result, builder, params)
        if params.generateTS:
            self.calculateEntropies(result, builder)
            result.trace = TemperatureEntropyTrace.fromResult(result)
        if isReversed:
            result = restoreOrientation(result)
        result.elapsedTime = perf_counter() - start
        if result.flag < 0:
            self.logger.warning("%s ended with flag %s (Q = %g W, pinch = %g K)", self.type, result.flag.name,
                                result.heatTransferred, result.pinch, extra={"methodname": self.calculate.__name__})
        self.logger.debug("%s", result, extra={"methodname": self.calculate.__name__})
        return result

    def checkViability(self, builder: ProfileBuilder):
        """
        Checks if heat can flow from the hot stream to the cold stream

        Returns
        -------
        SolverFlag or None
            NO_TRANSFER or NON_PHYSICAL when no heat can be exchanged, None otherwise.

        """
        tempDiff = builder.supplyTempDiff
        flowsPositive = builder.hot.massFlow > 0 and builder.cold.massFlow > 0
        self.logLocalVars(self.checkViability.__name__, locals())
        if flowsPositive and tempDiff > 1e-2:
            return None
        if flowsPositive and tempDiff > 0:
            return SolverFlag.NO_TRANSFER
        return SolverFlag.NON_PHYSICAL

    def createZoneEvaluator(self, builder, params):
        return ZoneEvaluator(builder, params)

    def createResult(self, flag, profile, zones, heatTransferredMax, params, **kwargs) -> SolverResult:
        return SolverResult(params.modelType, flag, profile, zones, heatTransferredMax)

    def solveDuty(self, builder: ProfileBuilder, params: ExchangerParameters) -> SolverResult:
        raise NotImplementedError

    def volumeShares(self, result: SolverResult):
        """
        Share of the exchanger volume given to each zone, proportional to the heat of the zone.
        A zero duty gives the whole volume to the single zone.
        """
        if result.heatTransferred <= 0.0:
            return np.full(len(result.zones), 1.0/len(result.zones))
        return result.heatVector/result.heatTransferred

    def calculateMasses(self, result: SolverResult, builder: ProfileBuilder, params: ExchangerParameters):
        """
        Integrates the mass of both streams zone by zone.
        """
        shares = self.volumeShares(result)
        for zone, share in zip(result.zones, shares):
            zone.volumeShare = float(share)
            index = zone.index
            for side in Side:
                sideParams = params.side(side)
                enthalpies = result.enthalpyHot if side is Side.HOT else result.enthalpyCold
                temperatures = result.tempHot if side is Side.HOT else result.tempCold
                zone.volume[side] = sideParams.volumeTotal*share
                zone.mass[side], diagnostics = calculateZoneMass(
                    builder.stream(side), sideParams, zone.volume[side], enthalpies[index:index + 2],
                    temperatures[index:index + 2], zone.regime[side])
                for message in diagnostics:
                    if message not in result.diagnostics:
                        result.diagnostics.append(message)
        result.massHot = float(sum(zone.mass[Side.HOT] for zone in result.zones))
        result.massCold = float(sum(zone.mass[Side.COLD] for zone in result.zones))
        self.logLocalVars(self.calculateMasses.__name__, {"massHot": result.massHot, "massCold": result.massCold})

    def calculateEntropies(self, result: SolverResult, builder: ProfileBuilder):
        """
        Entropies on the zone boundaries. Streams given by temperature are evaluated from
        pressure and temperature.
        """
        for side in Side:
            stream = builder.stream(side)
            if stream.inputMode is InputMode.TEMPERATURE:
                temperatures = result.tempHot if side is Side.HOT else result.tempCold
                entropies = [stream.fluid.calculateEntropy(ThermoProps.PT, stream.pressure, temperature)
                             for temperature in temperatures]
            else:
                enthalpies = result.enthalpyHot if side is Side.HOT else result.enthalpyCold
                entropies = [stream.calculateEntropy(enthalpy) for enthalpy in enthalpies]
            if side is Side.HOT:
                result.entropyHot = np.array(entropies)
            else:
                result.entropyCold = np.array(entropies)

class CstPinchHEX(HeatExchanger):
    """
    Heat exchanger whose duty gives a fixed pinch.
    """
    tolerance = 1e-6

    def validateParameters(self):
        self.params.requireFields("pinch")
        if self.params.pinch <= 0:
            raise ConfigurationError(f"{self.type} requires a positive pinch, got {self.params.pinch}")

    def createResult(self, flag, profile, zones, heatTransferredMax, params, **kwargs):
        return PinchResult(params.modelType, flag, profile, zones, heatTransferredMax, params.pinch)

    def solveDuty(self, builder, params):
        """
        Finds the duty with target pinch - achieved pinch = 0 on [0, Q max]. A supply
        temperature difference under the target pinch gives no duty.
        """
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        if builder.supplyTempDiff <= params.pinch:
            profile = builder.buildProfile(0.0)
            flag = SolverFlag.DUTY_LIMITED
        else:
            heatTransferred = brentq(lambda heat: params.pinch - builder.buildProfile(heat).pinch,
                                     0.0, heatTransferredMax, xtol=self.tolerance)
            profile = builder.buildProfile(heatTransferred)
            residualPinch = abs(1 - profile.pinch/params.pinch)
            flag = SolverFlag.CONVERGED if residualPinch < 1e-4 else SolverFlag.UNMATCHED
        self.logLocalVars(self.solveDuty.__name__, locals())
        zones = self.createZoneEvaluator(builder, params).evaluateZones(profile)
        return self.createResult(flag, profile, zones, heatTransferredMax, params)

class EffectivenessHEX(HeatExchanger):
    """
    Heat exchanger whose duty is a fraction of the maximum duty.
    """
    def calculateEffectiveness(self, builder, params):
        raise NotImplementedError

    def createResult(self, flag, profile, zones, heatTransferredMax, params, effectiveness=np.nan,
                     pinchMax=np.nan, **kwargs):
        return EffectivenessResult(params.modelType, flag, profile, zones, heatTransferredMax,
                                   effectiveness, pinchMax)

    def solveDuty(self, builder, params):
        """
        Q = effectiveness*Q max. The flag tells if the profile at Q max is pinched.
        """
        heatTransferredMax, profileMax = builder.calculateMaximumHeatTransfer()
        effectiveness = self.calculateEffectiveness(builder, params)
        profile = builder.buildProfile(effectiveness*heatTransferredMax)
        flag = SolverFlag.CONVERGED if abs(profileMax.pinch) < 1e-2 else SolverFlag.QMAX_UNPINCHED
        self.logLocalVars(self.solveDuty.__name__, locals())
        zones = self.createZoneEvaluator(builder, params).evaluateZones(profile)
        return self.createResult(flag, profile, zones, heatTransferredMax, params,
                                 effectiveness=effectiveness, pinchMax=profileMax.pinch)

class CstEffHEX(EffectivenessHEX):
    """
    Heat exchanger with a constant effectiveness.
    """
    def validateParameters(self):
        self.params.requireFields("effectiveness")
        if not 0 < self.params.effectiveness <= 1:
            raise ConfigurationError(f"{self.type} requires an effectiveness in (0, 1], "
                                     f"got {self.params.effectiveness}")

    def calculateEffectiveness(self, builder, params):
        return params.effectiveness

class PolEffHEX(EffectivenessHEX):
    """
    Heat exchanger with an effectiveness given by a second order polynomial in the mass flows
    normalized by their nominal values:
        e = c1 + c2*rh + c3*rc + c4*rh^2 + c5*rh*rc + c6*rc^2
    clamped to [1e-5, 1].
    """
    def validateParameters(self):
        self.params.requireFields("polynomialCoefficients")
        self.params.requireSideFields("massFlowNominal")
        if len(self.params.polynomialCoefficients) != 6:
            raise ConfigurationError(f"{self.type} requires 6 polynomial coefficients, "
                                     f"got {len(self.params.polynomialCoefficients)}")

    def calculateEffectiveness(self, builder, params):
        ratioHot = builder.hot.massFlow/params.hot.massFlowNominal
        ratioCold = builder.cold.massFlow/params.cold.massFlowNominal
        coeffs = params.polynomialCoefficients
        effectiveness = coeffs[0] + coeffs[1]*ratioHot + coeffs[2]*ratioCold + coeffs[3]*ratioHot**2\
            + coeffs[4]*ratioHot*ratioCold + coeffs[5]*ratioCold**2
        self.logLocalVars(self.calculateEffectiveness.__name__, locals())
        return clampEffectiveness(effectiveness)

class ConductanceHEX(HeatExchanger):
    """
    Heat exchanger whose duty makes the area required by the convective coefficients equal to
    the installed area.
    """
    tolerance = 1e-8
    reportMeanCoefficients = True

    def validateParameters(self):
        self.params.requireSideFields("areaTotal")
        self.createCoefficientModel(self.params, {Side.HOT: self.hotStream, Side.COLD: self.coldStream})

    def createCoefficientModel(self, params, streams):
        raise NotImplementedError

    def createZoneEvaluator(self, builder, params):
        coefficientModel = self.createCoefficientModel(params, {Side.HOT: builder.hot, Side.COLD: builder.cold})
        return ZoneEvaluator(builder, params, coefficientModel)

    def createResult(self, flag, profile, zones, heatTransferredMax, params, **kwargs):
        return ConductanceResult(params.modelType, flag, profile, zones, heatTransferredMax,
                                 params.hot.areaTotal, params.cold.areaTotal, self.reportMeanCoefficients)

    def solveDuty(self, builder, params):
        """
        Finds the duty with 1 - required hot area/installed hot area = 0 on [0, Q max]. If the
        required area at Q max is still smaller than the installed area, the duty is Q max.
        An unmatched area with a profile not pinched at Q max is flagged QMAX_UNPINCHED.
        """
        heatTransferredMax, profileMax = builder.calculateMaximumHeatTransfer()
        evaluator = self.createZoneEvaluator(builder, params)

        def areaResidual(heat):
            zones = evaluator.evaluateZones(builder.buildProfile(heat))
            residual = 1 - sum(zone.area[Side.HOT] for zone in zones)/params.hot.areaTotal
            self.logger.debug("Q: %g, area residual: %g", heat, residual,
                              extra={"methodname": self.solveDuty.__name__})
            return residual
        residualMax = areaResidual(heatTransferredMax)
        if residualMax > 0:
            heatTransferred = heatTransferredMax
        else:
            heatTransferred = brentq(areaResidual, 0.0, heatTransferredMax, xtol=self.tolerance)
        profile = builder.buildProfile(heatTransferred)
        zones = evaluator.evaluateZones(profile)
        result = self.createResult(SolverFlag.UNMATCHED, profile, zones, heatTransferredMax, params)
        if abs(result.areaResidual) < 1e-4:
            result.flag = SolverFlag.CONVERGED
        elif heatTransferred == heatTransferredMax and abs(profileMax.pinch) < 1e-2:
            result.flag = SolverFlag.DUTY_LIMITED
        elif abs(profileMax.pinch) >= 1e-2:
            result.flag = SolverFlag.QMAX_UNPINCHED
        self.logLocalVars(self.solveDuty.__name__, locals())
        return result

    def volumeShares(self, result):
        """
        Share of the exchanger volume given to each zone, proportional to the area of the zone.
        """
        areas = result.zoneVector("area", Side.HOT)
        if result.heatTransferred <= 0.0 or not np.nansum(areas) > 0:
            return super().volumeShares(result)
        return areas/np.nansum(areas)

class HConvCstHEX(ConductanceHEX):
    """
    Heat exchanger with constant convective coefficients per side and per regime.
    """
    tolerance = 1e-6
    reportMeanCoefficients = False

    def createCoefficientModel(self, params, streams):
        return ConstantCoefficients(params)

class HConvVarHEX(ConductanceHEX):
    """
    Heat exchanger with convective coefficients scaled from nominal values with the mass flow.
    """
    def createCoefficientModel(self, params, streams):
        return FlowDependentCoefficients(params)

class HConvCorHEX(ConductanceHEX):
    """
    Heat exchanger with convective coefficients from empirical correlations.
    """
    def createCoefficientModel(self, params, streams):
        return CorrelationCoefficients(params, streams)

HEAT_EXCHANGERS = {ModelType.CSTPINCH: CstPinchHEX,
                   ModelType.CSTEFF: CstEffHEX,
                   ModelType.POLEFF: PolEffHEX,
                   ModelType.HCONVCST: HConvCstHEX,
                   ModelType.HCONVVAR: HConvVarHEX,
                   ModelType.HCONVCOR: HConvCorHEX}

def createHeatExchanger(hotStream: StreamState, coldStream: StreamState, params: ExchangerParameters) -> HeatExchanger:
    """
    Builds the heat exchanger class of the model type of params. Missing or inconsistent
    parameters raise ConfigurationError here, before anything is solved.
    """
    return HEAT_EXCHANGERS[params.modelType](hotStream, coldStream, params)

def simulateHeatExchanger(hotStream: StreamState, coldStream: StreamState, params: ExchangerParameters) -> SolverResult:
    return createHeatExchanger(hotStream, coldStream, params).calculate()
