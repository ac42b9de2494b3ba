# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 15:36:02 2026

@author: MBHEX
"""

import json
import numpy as np
import pytest
from MBHEX.models.Fluid import Fluid, ThermoProps, ZoneType
from MBHEX.models.HeatExchangers import *
from MBHEX.models.Parameters import ConfigurationError, ExchangerParameters, Side, SideParameters, StreamState,\
    VoidFractionModel
from MBHEX.models.Profile import ProfileBuilder
from MBHEX.models.Results import SolverFlag

def pytest_generate_tests(metafunc):
    # called once per each test function
    if metafunc.function.__name__ in metafunc.cls.params.keys():
        funcarglist = metafunc.cls.params[metafunc.function.__name__]
        argnames = sorted(funcarglist[0])
        metafunc.parametrize(
            argnames, [[funcargs[name] for name in argnames] for funcargs in funcarglist]
        )

ALL_MODELS = [dict(modelType=modelType) for modelType in ("CstPinch", "CstEff", "PolEff", "hConvCst", "hConvVar", "hConvCor")]

def plateParameters(modelType, areaTotal=0.5, **kwargs):
    """
    Plate evaporator heating R245fa with thermal oil, with the parameters of every model type
    """
    plateLength = 0.459
    plateGap = 0.0018
    enlargementFactor = (9.8/98)/(0.191*plateLength)
    hot = SideParameters(volumeTotal=0.009, diameterHydraulic=2*plateGap/enlargementFactor,
                         crossSection=0.191*plateGap, numChannels=49, correlationSinglePhase="Wanniarachchi",
                         correlationTwoPhase="Han_condensation", hConv=1000.0, hConvNominal=1000.0,
                         massFlowNominal=0.5, exponents=0.8)
    cold = SideParameters(volumeTotal=0.009, diameterHydraulic=2*plateGap/enlargementFactor,
                          crossSection=0.191*plateGap, numChannels=50, correlationSinglePhase="Wanniarachchi",
                          correlationTwoPhase="Almalfi_boiling", hConv={"liq": 1000.0, "tp": 3000.0, "vap": 500.0},
                          hConvNominal={"liq": 1000.0, "tp": 3000.0, "vap": 500.0}, massFlowNominal=0.05,
                          exponents={"liq": 0.8, "tp": 0.6, "vap": 0.8})
    values = dict(pinch=5.0, effectiveness=0.8, polynomialCoefficients=[0.5, 0.1, 0.1, 0.0, 0.0, 0.0],
                  areaTotal=areaTotal, inclinationAngle=np.radians(30), corrugationPitch=0.007213,
                  enlargementFactor=enlargementFactor, plateLength=plateLength, numTwoPhaseCells=4)
    values.update(kwargs)
    return ExchangerParameters(modelType, hot=hot, cold=cold, **values)

@pytest.fixture
def oil():
    return Fluid("T66", "INCOMP")

@pytest.fixture
def refrigerant():
    return Fluid("R245fa", "HEOS")

@pytest.fixture
def oilStream(oil):
    return StreamState(oil, 2e5, 400.0, 0.5, "T")

@pytest.fixture
def refrigerantStream(refrigerant):
    return StreamState(refrigerant, 8e5, refrigerant.calculateEnthalpy(ThermoProps.PT, 8e5, 293.15), 0.05, "H")

class TestHeatExchangers:
    params = {
        "test_energyBalance": ALL_MODELS,
        "test_orientationRoundTrip": ALL_MODELS,
        "test_idempotence": [dict(modelType="CstPinch"), dict(modelType="hConvCor")],
        "test_noTransfer": [dict(modelType="CstPinch"), dict(modelType="CstEff"), dict(modelType="hConvCst")],
        "test_nonPhysical": [dict(tempHot=350.0, massFlowHot=0.0, massFlowCold=0.5),
                             dict(tempHot=350.0, massFlowHot=0.5, massFlowCold=-0.1),
                             dict(tempHot=300.0, massFlowHot=0.5, massFlowCold=0.5)],
        "test_cstEff": [dict(effectiveness=0.2), dict(effectiveness=0.8), dict(effectiveness=1.0)],
        "test_polEff": [dict(coefficients=[0.5, 0.1, 0.1, 0.0, 0.0, 0.0], effectiveness=0.7),
                        dict(coefficients=[2.0, 0.0, 0.0, 0.0, 0.0, 0.0], effectiveness=1.0),
                        dict(coefficients=[-1.0, 0.0, 0.0, 0.0, 0.0, 0.0], effectiveness=1e-5)]
        }

    def test_energyBalance(self, modelType, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters(modelType))
        assert(result.flag > 0)
        assert(0 < result.heatTransferred <= result.heatTransferredMax)
        assert(0.5*(result.enthalpyHot[-1] - result.enthalpyOutHot) == pytest.approx(result.heatTransferred, rel=1e-9))
        assert(0.05*(result.enthalpyOutCold - result.enthalpyCold[0]) == pytest.approx(result.heatTransferred, rel=1e-9))
        assert(np.sum(result.heatVector) == pytest.approx(result.heatTransferred))
        assert(np.all(result.tempDiff > -1e-6))
        assert(result.pinch == pytest.approx(np.min(result.tempDiff)))
        assert(not result.isReversed)
        assert(result.elapsedTime > 0)

    def test_orientationRoundTrip(self, modelType, oilStream, refrigerantStream):
        params = plateParameters(modelType)
        result = simulateHeatExchanger(oilStream, refrigerantStream, params)
        swapped = simulateHeatExchanger(refrigerantStream, oilStream, params.swapped())
        assert(swapped.isReversed)
        assert(swapped.flag == result.flag)
        assert(swapped.heatTransferred == pytest.approx(result.heatTransferred, rel=1e-9))
        assert(swapped.enthalpyHot == pytest.approx(result.enthalpyCold[::-1], rel=1e-9))
        assert(swapped.enthalpyCold == pytest.approx(result.enthalpyHot[::-1], rel=1e-9))
        assert(swapped.tempHot == pytest.approx(result.tempCold[::-1], rel=1e-9))
        assert(swapped.fractions == pytest.approx(1.0 - result.fractions[::-1], abs=1e-9))
        assert(swapped.massHot == pytest.approx(result.massCold, rel=1e-9))
        assert(swapped.massCold == pytest.approx(result.massHot, rel=1e-9))
        assert(swapped.zoneVector("regime", Side.HOT) == result.zoneVector("regime", Side.COLD)[::-1])
        assert(swapped.trace.fractionsGeometric[-1] == pytest.approx(1.0))

    def test_idempotence(self, modelType, oilStream, refrigerantStream):
        heatExchanger = createHeatExchanger(oilStream, refrigerantStream, plateParameters(modelType))
        first = heatExchanger.calculate()
        second = heatExchanger.calculate()
        assert(first.flag == second.flag)
        assert(first.heatTransferred == second.heatTransferred)
        assert(np.array_equal(first.enthalpyCold, second.enthalpyCold))
        assert(first.massCold == second.massCold)

    def test_noTransfer(self, modelType, oil):
        hotStream = StreamState(oil, 2e5, 300.005, 0.5, "T")
        coldStream = StreamState(oil, 2e5, 300.0, 0.5, "T")
        result = simulateHeatExchanger(hotStream, coldStream, plateParameters(modelType))
        assert(result.flag is SolverFlag.NO_TRANSFER)
        assert(result.heatTransferred == 0.0)
        assert(len(result.zones) == 1)
        assert(result.zones[0].volumeShare == 1.0)
        assert(result.massHot > 0)

    def test_nonPhysical(self, tempHot, massFlowHot, massFlowCold, oil):
        hotStream = StreamState(oil, 2e5, tempHot, massFlowHot, "T")
        coldStream = StreamState(oil, 2e5, 300.0, massFlowCold, "T")
        result = simulateHeatExchanger(hotStream, coldStream, plateParameters("CstEff"))
        assert(result.flag is SolverFlag.NON_PHYSICAL)
        assert(result.heatTransferred == 0.0)

    def test_nonPhysical_twoPhaseWithoutFlow(self, oilStream, refrigerant):
        coldStream = StreamState(refrigerant, 8e5, refrigerant.calculateEnthalpy(ThermoProps.PQ, 8e5, 0.3), 0.0, "H")
        params = plateParameters("CstEff")
        params.cold.voidFraction = VoidFractionModel.HUGHMARK
        result = simulateHeatExchanger(oilStream, coldStream, params)
        assert(result.flag is SolverFlag.NON_PHYSICAL)
        assert(result.zoneVector("regime", Side.COLD) == [ZoneType.TWOPHASE])
        densityVapor = refrigerant.calculateDensity(ThermoProps.PQ, 8e5, 1.0)
        assert(np.isfinite(result.massCold))
        assert(result.massCold == pytest.approx(0.009*densityVapor))
        assert(any("assuming alpha = 1" in message for message in result.diagnostics))

    def test_cstPinch(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("CstPinch"))
        assert(result.flag is SolverFlag.CONVERGED)
        assert(result.pinch == pytest.approx(5.0, rel=1e-4))
        assert(result.residualPinch < 1e-4)
        assert(result.heatTransferred < result.heatTransferredMax)

    def test_cstPinch_supplyDifferenceUnderPinch(self, oil, refrigerantStream):
        hotStream = StreamState(oil, 2e5, 296.15, 0.5, "T")
        result = simulateHeatExchanger(hotStream, refrigerantStream, plateParameters("CstPinch"))
        assert(result.flag is SolverFlag.DUTY_LIMITED)
        assert(result.heatTransferred == 0.0)

    def test_cstEff(self, effectiveness, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream,
                                       plateParameters("CstEff", effectiveness=effectiveness))
        assert(result.flag is SolverFlag.CONVERGED)
        assert(result.effectiveness == effectiveness)
        assert(result.heatTransferred == pytest.approx(effectiveness*result.heatTransferredMax))
        assert(abs(result.pinchMax) < 1e-2)

    def test_polEff(self, coefficients, effectiveness, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream,
                                       plateParameters("PolEff", polynomialCoefficients=coefficients))
        assert(result.effectiveness == pytest.approx(effectiveness))
        assert(result.heatTransferred == pytest.approx(effectiveness*result.heatTransferredMax))

    def test_masses(self, oil, oilStream, refrigerant, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("CstEff"))
        densityMin = oil.calculateDensity(ThermoProps.PT, 2e5, 400.0)
        densityMax = oil.calculateDensity(ThermoProps.PT, 2e5, result.tempOutHot)
        assert(0.009*densityMin*(1 - 1e-6) <= result.massHot <= 0.009*densityMax*(1 + 1e-6))
        densityLiquid = refrigerant.calculateDensity(ThermoProps.PT, 8e5, 293.15)
        assert(0 < result.massCold < 0.009*densityLiquid)
        assert(sum(zone.volumeShare for zone in result.zones) == pytest.approx(1.0))
        assert(result.massCold == pytest.approx(sum(result.zoneVector("mass", Side.COLD))))

    def test_temperatureEntropyTrace(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("hConvCst"))
        trace = result.trace
        assert(len(trace.fractionsGeometric) == len(result.fractions))
        assert(trace.fractionsGeometric[0] == 0.0)
        assert(trace.fractionsGeometric[-1] == pytest.approx(1.0))
        assert(np.all(np.isfinite(trace.entropyHot)))
        assert(np.all(np.diff(trace.entropyCold) > 0))
        assert(np.all(np.diff(trace.entropyHot) > 0))
        json.dumps(result.toDict())

    def test_withoutTrace(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("CstEff", generateTS=False))
        assert(result.trace is None)
        assert(np.all(np.isnan(result.entropyHot)))
        assert("trace" not in result.toDict())

    def test_massByVoidFractionModel(self, oilStream, refrigerantStream):
        masses = {}
        for model in (VoidFractionModel.HOMOGENEOUS, VoidFractionModel.ZIVI, VoidFractionModel.HUGHMARK):
            params = plateParameters("hConvCor", areaTotal=5.0)
            params.cold.voidFraction = model
            result = simulateHeatExchanger(oilStream, refrigerantStream, params)
            assert(ZoneType.TWOPHASE in result.zoneVector("regime", Side.COLD))
            masses[model] = result.massCold
        assert(masses[VoidFractionModel.HOMOGENEOUS] < masses[VoidFractionModel.ZIVI] < masses[VoidFractionModel.HUGHMARK])

    def test_outputList(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("CstPinch"))
        outputs = {description: (units, value) for description, units, value in result.outputList()}
        assert(outputs["Q Total"] == ("W", result.heatTransferred))
        assert(outputs["Solver flag"][1] == 1)
        heatByRegime = sum(outputs[f"Q {regime} {Side.COLD}"][1] for regime in ZoneType)
        assert(heatByRegime == pytest.approx(result.heatTransferred))

class TestConductanceHeatExchangers:
    params = {
        "test_converged": [dict(modelType="hConvCst"), dict(modelType="hConvVar"), dict(modelType="hConvCor")],
        "test_dutyLimited": [dict(modelType="hConvCst"), dict(modelType="hConvCor")],
        "test_requiredAreaIncreasing": [dict(modelType="hConvCst"), dict(modelType="hConvVar"), dict(modelType="hConvCor")]
        }

    def test_converged(self, modelType, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters(modelType, areaTotal=0.1))
        assert(result.flag is SolverFlag.CONVERGED)
        assert(abs(result.areaResidual) < 1e-4)
        assert(result.areaRequiredHot == pytest.approx(0.1, rel=1e-4))
        assert(result.areaRequiredCold == pytest.approx(0.1, rel=1e-4))
        assert(0 < result.epsilonThermal < 1)
        for zone in result.zones:
            assert(zone.conductance == pytest.approx(zone.heatTransferred/zone.tempDiffLog))

    def test_dutyLimited(self, modelType, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters(modelType, areaTotal=1e4))
        assert(result.flag is SolverFlag.DUTY_LIMITED)
        assert(result.heatTransferred == result.heatTransferredMax)
        assert(result.areaResidual > 0)
        assert(result.epsilonThermal == 1.0)

    def test_requiredAreaIncreasing(self, modelType, oilStream, refrigerantStream):
        params = plateParameters(modelType)
        heatExchanger = createHeatExchanger(oilStream, refrigerantStream, params)
        builder = ProfileBuilder(oilStream, refrigerantStream, params)
        evaluator = heatExchanger.createZoneEvaluator(builder, params)
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        areas = [sum(zone.area[Side.HOT] for zone in evaluator.evaluateZones(builder.buildProfile(fraction*heatTransferredMax)))
                 for fraction in np.linspace(0.01, 0.99, 20)]
        assert(np.all(np.isfinite(areas)))
        assert(np.all(np.diff(areas) >= 0))

    def test_qMaxUnpinched(self, mocker, oilStream, refrigerantStream):
        calculateMaximumHeatTransfer = ProfileBuilder.calculateMaximumHeatTransfer

        def unpinchedMaximum(builder):
            heatTransferredMax, profile = calculateMaximumHeatTransfer(builder)
            profile.pinch = 5.0
            return heatTransferredMax, profile
        mocker.patch.object(ProfileBuilder, "calculateMaximumHeatTransfer", autospec=True, side_effect=unpinchedMaximum)
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("hConvCst", areaTotal=1e4))
        assert(result.flag is SolverFlag.QMAX_UNPINCHED)
        assert(result.heatTransferred == result.heatTransferredMax)

    def test_boilingIterations(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("hConvCor", areaTotal=9.8))
        regimes = result.zoneVector("regime", Side.COLD)
        assert(ZoneType.TWOPHASE in regimes)
        for zone, regime in zip(result.zones, regimes):
            if regime is ZoneType.TWOPHASE:
                assert(1 <= zone.boilingIterations <= 10)
            else:
                assert(zone.boilingIterations == 0)
        assert(np.all(result.zoneVector("heatTransferCoeff", Side.COLD) > 0))

    def test_meanCoefficients(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("hConvVar", areaTotal=0.05))
        means = result.meanCoefficients
        assert(np.isnan(means[Side.HOT][ZoneType.TWOPHASE]))
        assert(np.isnan(means[Side.COLD][ZoneType.VAPOR]))
        assert(means[Side.HOT][ZoneType.LIQUID] == pytest.approx(1000.0))
        assert(means[Side.COLD][ZoneType.LIQUID] == pytest.approx(1000.0))

    def test_meanCoefficients_constant(self, oilStream, refrigerantStream):
        result = simulateHeatExchanger(oilStream, refrigerantStream, plateParameters("hConvCst", areaTotal=0.05))
        assert(result.meanCoefficients is None)
        assert(np.all(result.zoneVector("heatTransferCoeff", Side.HOT) == 1000.0))

class TestConfiguration:
    params = {
        "test_missingParameters": [dict(modelType="CstPinch", kwargs=dict(pinch=None)),
                                   dict(modelType="CstPinch", kwargs=dict(pinch=-1.0)),
                                   dict(modelType="CstEff", kwargs=dict(effectiveness=None)),
                                   dict(modelType="CstEff", kwargs=dict(effectiveness=1.5)),
                                   dict(modelType="CstEff", kwargs=dict(effectiveness=0.0)),
                                   dict(modelType="PolEff", kwargs=dict(polynomialCoefficients=[0.5, 0.1, 0.1])),
                                   dict(modelType="hConvCor", kwargs=dict(inclinationAngle=None)),
                                   dict(modelType="PolEff", kwargs=dict(polynomialCoefficients=None))]
        }

    def test_missingParameters(self, modelType, kwargs, oilStream, refrigerantStream):
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, plateParameters(modelType, **kwargs))

    def test_missingSideParameters(self, oilStream, refrigerantStream):
        params = plateParameters("hConvCst")
        params.cold.hConv = None
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)
        params = plateParameters("hConvVar")
        params.hot.exponents = None
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)
        params = plateParameters("hConvCor")
        params.cold.correlationTwoPhase = None
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)

    def test_unknownCorrelation(self, oilStream, refrigerantStream):
        params = plateParameters("hConvCor")
        params.cold.correlationSinglePhase = "Dittus_Boelter"
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)

    def test_twoBoilingSides(self, refrigerant, refrigerantStream):
        hotStream = StreamState(refrigerant, 2e6, refrigerant.calculateEnthalpy(ThermoProps.PQ, 2e6, 0.5), 0.05, "H")
        params = plateParameters("hConvCor")
        params.hot.correlationTwoPhase = "Han_boiling"
        with pytest.raises(ConfigurationError):
            createHeatExchanger(hotStream, refrigerantStream, params)

    def test_hughmarkWithoutGeometry(self, oilStream, refrigerantStream):
        params = plateParameters("CstEff")
        params.cold.voidFraction = VoidFractionModel.HUGHMARK
        params.cold.diameterHydraulic = None
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)
        params.cold.alphaMass = 0.8
        result = simulateHeatExchanger(oilStream, refrigerantStream, params)
        assert(result.flag is SolverFlag.CONVERGED)
        assert(result.diagnostics == [])

    def test_missingAreaTotal(self, oilStream, refrigerantStream):
        params = plateParameters("hConvCst", areaTotal=None)
        with pytest.raises(ConfigurationError):
            createHeatExchanger(oilStream, refrigerantStream, params)
