# -*- coding: utf-8 -*-
"""
Created on Fri Oct 16 11:08:12 2026

@author: MBHEX
"""
import pytest
import numpy as np
from MBHEX.models.Fluid import Fluid, SaturationProps, ThermoProps, ZoneType

def pytest_generate_tests(metafunc):
    if metafunc.function.__name__ in metafunc.cls.params.keys():
        funcarglist = metafunc.cls.params[metafunc.function.__name__]
        argnames = sorted(funcarglist[0])
        metafunc.parametrize(
            argnames, [[funcargs[name] for name in argnames] for funcargs in funcarglist]
        )

@pytest.fixture
def refrigerant():
    return Fluid("R245fa", "HEOS")

@pytest.fixture
def brine():
    return Fluid("MEG", "IncompressibleBackend", massFraction=0.30)

class TestFluid:
    params = {"test_isPhaseChanging": [dict(name="R245fa", backEnd="HEOS", massFraction=1.0, pressure=8e5, expected=True),
                                       dict(name="R245fa", backEnd="HEOS", massFraction=1.0, pressure=5e6, expected=False),
                                       dict(name="T66", backEnd="INCOMP", massFraction=1.0, pressure=2e5, expected=False),
                                       dict(name="MEG", backEnd="IncompressibleBackend", massFraction=0.3, pressure=1e5, expected=False)],
              "test_classifyEnthalpy": [dict(offset=-1000.0, expected=ZoneType.LIQUID),
                                        dict(offset=50000.0, expected=ZoneType.TWOPHASE),
                                        dict(offset=500000.0, expected=ZoneType.VAPOR)]}

    def test_isPhaseChanging(self, name, backEnd, massFraction, pressure, expected):
        assert(Fluid(name, backEnd, massFraction=massFraction).isPhaseChanging(pressure) == expected)

    def test_incompressibleCriticalPressure(self, brine):
        assert(brine.isIncompressible)
        assert(np.isinf(brine.pressureCritical))
        assert(brine.abstractState.massFractions == {"MEG": 0.3, "Water": pytest.approx(0.7)})

    def test_incompressibleSaturation(self, brine):
        assert(brine.calculateSaturationProps(1e5) is None)
        assert(brine.calculateQuality(ThermoProps.PT, 1e5, 290.0) == 0.0)
        with pytest.raises(NotImplementedError):
            brine.calculateTemperature(ThermoProps.PQ, 1e5, 0.0)

    def test_temperatureEnthalpyRoundTrip(self, refrigerant):
        enthalpy = refrigerant.calculateEnthalpy(ThermoProps.PT, 8e5, 300.0)
        assert(refrigerant.calculateTemperature(ThermoProps.HP, enthalpy, 8e5) == pytest.approx(300.0, abs=1e-4))

    def test_calculatePrandtl(self, brine):
        heatCapacity = brine.calculateHeatCapacity(ThermoProps.PT, 1e5, 290.0)
        viscosity = brine.calculateViscosity(ThermoProps.PT, 1e5, 290.0)
        conductivity = brine.calculateConductivity(ThermoProps.PT, 1e5, 290.0)
        assert(brine.calculatePrandtl(ThermoProps.PT, 1e5, 290.0) == pytest.approx(heatCapacity*viscosity/conductivity))

    def test_calculateTemperatureAveraged(self, brine):
        single = brine.calculateDensity(ThermoProps.PT, 1e5, 300.0)
        assert(brine.calculateTemperatureAveraged(brine.calculateDensity, 1e5, 300.0, 300.0) == pytest.approx(single))
        averaged = brine.calculateTemperatureAveraged(brine.calculateDensity, 1e5, 280.0, 320.0)
        assert(brine.calculateDensity(ThermoProps.PT, 1e5, 320.0) < averaged < brine.calculateDensity(ThermoProps.PT, 1e5, 280.0))

    def test_saturationProps(self, mocker, refrigerant):
        spy = mocker.spy(refrigerant.abstractState, "calculateEnthalpy")
        saturation = refrigerant.calculateSaturationProps(8e5)
        assert(isinstance(saturation, SaturationProps))
        assert(spy.call_count == 2)
        assert(saturation.tempBubble == pytest.approx(saturation.tempDew))
        assert(saturation.densityLiquid > saturation.densityVapor)
        assert(saturation.enthalpyVaporization > 0)
        assert(saturation.surfaceTension > 0)

    def test_calculateQuality(self, refrigerant):
        saturation = refrigerant.calculateSaturationProps(8e5)
        middle = 0.5*(saturation.enthalpyLiquid + saturation.enthalpyVapor)
        assert(saturation.calculateQuality(middle) == pytest.approx(0.5))
        assert(saturation.calculateQuality(saturation.enthalpyLiquid - 1e4) == 0.0)
        assert(saturation.calculateQuality(saturation.enthalpyVapor + 1e4) == 1.0)

    def test_classifyEnthalpy(self, refrigerant, offset, expected):
        saturation = refrigerant.calculateSaturationProps(8e5)
        assert(saturation.classifyEnthalpy(saturation.enthalpyLiquid + offset) is expected)
