# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 14:17:29 2026

@author: MBHEX
"""

import numpy as np
import pytest
from MBHEX.models.Fluid import Fluid, ThermoProps, ZoneType
from MBHEX.models.Parameters import ExchangerParameters, Side, StreamState
from MBHEX.models.Profile import ProfileBuilder, StreamConditions
from MBHEX.models.ZoneEvaluator import ZoneEvaluator

def pytest_generate_tests(metafunc):
    # called once per each test function
    if metafunc.function.__name__ in metafunc.cls.params.keys():
        funcarglist = metafunc.cls.params[metafunc.function.__name__]
        argnames = sorted(funcarglist[0])
        metafunc.parametrize(
            argnames, [[funcargs[name] for name in argnames] for funcargs in funcarglist]
        )

@pytest.fixture
def oil():
    return Fluid("T66", "INCOMP")

@pytest.fixture
def refrigerant():
    return Fluid("R245fa", "HEOS")

@pytest.fixture
def refrigerantStream(refrigerant):
    return StreamState(refrigerant, 8e5, refrigerant.calculateEnthalpy(ThermoProps.PT, 8e5, 293.15), 0.05, "H")

@pytest.fixture
def exchangerParams():
    return ExchangerParameters("CstEff", effectiveness=0.8, numTwoPhaseCells=2)

@pytest.fixture
def builder(oil, refrigerantStream, exchangerParams):
    return ProfileBuilder(StreamState(oil, 2e5, 400.0, 0.5, "T"), refrigerantStream, exchangerParams)

class TestProfileBuilder:
    params = {
        "test_buildProfile_energyBalance": [dict(dutyFraction=0.1), dict(dutyFraction=0.3),
                                            dict(dutyFraction=0.6), dict(dutyFraction=0.9),
                                            dict(dutyFraction=1.0)],
        "test_buildProfile_fractions": [dict(dutyFraction=0.3), dict(dutyFraction=0.6), dict(dutyFraction=1.0)]
        }

    def test_buildProfile_energyBalance(self, dutyFraction, builder):
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        profile = builder.buildProfile(dutyFraction*heatTransferredMax)
        assert(profile.energyImbalance() < 1e-6*profile.heatTransferred)
        assert(np.sum(profile.heatVector) == pytest.approx(profile.heatTransferred))
        assert(0.5*(profile.enthalpyHot[-1] - profile.enthalpyOutHot) == pytest.approx(profile.heatTransferred, rel=1e-9))
        assert(0.05*(profile.enthalpyOutCold - profile.enthalpyCold[0]) == pytest.approx(profile.heatTransferred, rel=1e-9))

    def test_buildProfile_fractions(self, dutyFraction, builder):
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        profile = builder.buildProfile(dutyFraction*heatTransferredMax)
        assert(profile.fractions[0] == 0.0)
        assert(profile.fractions[-1] == 1.0)
        assert(np.all(np.diff(profile.fractions) > 0))
        assert(np.all(np.diff(profile.enthalpyHot) > 0))
        assert(np.all(np.diff(profile.enthalpyCold) > 0))
        assert(np.all(profile.heatVector > 0))
        assert(len(profile.tempHot) == len(profile.tempCold) == profile.numCells + 1)

    def test_pinch_decreasingWithDuty(self, builder):
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        pinches = [builder.buildProfile(fraction*heatTransferredMax).pinch for fraction in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)]
        assert(np.all(np.diff(pinches) <= 1e-9))
        assert(pinches[0] == pytest.approx(builder.supplyTempDiff))

    def test_calculateMaximumHeatTransfer(self, builder):
        heatTransferredMax, profile = builder.calculateMaximumHeatTransfer()
        assert(heatTransferredMax > 0)
        assert(abs(profile.pinch) < 1e-3)
        assert(profile.tempOutCold == pytest.approx(400.0, abs=1e-3))
        assert(profile.heatTransferred == heatTransferredMax)

    def test_calculateMaximumHeatTransfer_internalPinch(self, oil, refrigerantStream, exchangerParams):
        builder = ProfileBuilder(StreamState(oil, 2e5, 400.0, 0.05, "T"), refrigerantStream, exchangerParams)
        heatTransferredHot = 0.05*(builder.hot.enthalpySupply - builder.hot.calculateEnthalpy(293.15))
        heatTransferredMax, profile = builder.calculateMaximumHeatTransfer()
        assert(heatTransferredMax < heatTransferredHot - 1.0)
        assert(abs(profile.pinch) < 1e-3)
        assert(0 < profile.pinchIndex < profile.numCells)

    def test_buildProfile_zeroDuty(self, builder):
        profile = builder.buildProfile(0.0)
        assert(profile.numCells == 1)
        assert(np.all(profile.heatVector == 0.0))
        assert(profile.enthalpyOutCold == builder.cold.enthalpySupply)
        assert(profile.pinch == pytest.approx(400.0 - 293.15, abs=1e-4))

    def test_buildProfile_saturationBoundaries(self, builder, exchangerParams):
        heatTransferredMax = builder.calculateMaximumHeatTransfer()[0]
        profile = builder.buildProfile(0.6*heatTransferredMax)
        saturation = builder.cold.saturation
        assert(saturation.enthalpyLiquid < profile.enthalpyOutCold < saturation.enthalpyVapor)
        assert(profile.numCells == 1 + exchangerParams.numTwoPhaseCells)
        assert(profile.enthalpyCold[1] == pytest.approx(saturation.enthalpyLiquid))
        zones = ZoneEvaluator(builder, exchangerParams).evaluateZones(profile)
        assert([zone.regime[Side.COLD] for zone in zones] == [ZoneType.LIQUID, ZoneType.TWOPHASE, ZoneType.TWOPHASE])
        assert(all(zone.regime[Side.HOT] is ZoneType.LIQUID for zone in zones))
        assert(np.all(profile.logMeanTempDiffs() > 0))

class TestStreamConditions:
    params = {
        "test_phaseBoundaries_singlePhase": [dict(enthalpyLow=1e5, enthalpyHigh=2e5),
                                             dict(enthalpyLow=-5e4, enthalpyHigh=3e4)]
        }

    def test_phaseBoundaries_singlePhase(self, enthalpyLow, enthalpyHigh, oil):
        stream = StreamConditions(StreamState(oil, 2e5, 350.0, 1.0, "T"))
        assert(stream.saturation is None)
        assert(stream.phaseBoundaries(enthalpyLow, enthalpyHigh, 5) == [enthalpyLow, enthalpyHigh])

    def test_phaseBoundaries_twoPhase(self, refrigerantStream):
        stream = StreamConditions(refrigerantStream)
        saturation = stream.saturation
        boundaries = stream.phaseBoundaries(saturation.enthalpyLiquid - 1e4, saturation.enthalpyVapor + 1e4, 4)
        assert(len(boundaries) == 7)
        assert(boundaries[1] == pytest.approx(saturation.enthalpyLiquid))
        assert(boundaries[-2] == pytest.approx(saturation.enthalpyVapor))
        assert(np.diff(boundaries[1:-1]) == pytest.approx(np.full(4, 0.25*saturation.enthalpyVaporization)))

    def test_supplyState(self, refrigerantStream):
        stream = StreamConditions(refrigerantStream)
        assert(stream.tempSupply == pytest.approx(293.15, abs=1e-4))
        assert(stream.saturation.classifyEnthalpy(stream.enthalpySupply) is ZoneType.LIQUID)
        assert(stream.saturation.tempBubble > 340)
