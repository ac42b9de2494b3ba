# -*- coding: utf-8 -*-
"""
Created on Fri Oct  9 13:48:12 2026

@author: MBHEX
"""
from copy import copy
import logging
import numpy as np
from MBHEX.calculations.FixedPoint import iterateFixedPoint
from MBHEX.models.Correlations import BOILING_CORRELATIONS, CONDENSATION_CORRELATIONS,\
    SINGLE_PHASE_CORRELATIONS, CorrelationGeometry, FluidMechanics, TwoPhaseState,\
    calculateSurfaceEfficiency, resolveCorrelation
from MBHEX.models.Fluid import ThermoProps, ZoneType
from MBHEX.models.Parameters import ConfigurationError, ExchangerParameters, InputMode, Side

class Zone():
    """
    Cell of the heat exchanger shared by both streams. Stream dependent values are stored in
    dicts keyed by Side so that exchanging the roles of the streams only swaps dict values.

    Attributes
    ----------
    heatTransferred : float
        heat exchanged in the zone in W.
    fractionBounds : tuple
        cumulative heat fractions at both ends of the zone.
    regime : dict
        ZoneType of each stream.
    tempDiffLog : float
        log mean temperature difference in K.
    heatTransferCoeff, finEfficiency, area, volume, mass : dict
        per stream values, NaN until evaluated.
    conductance : float
        overall UA of the zone in W/K.
    volumeShare : float
        share of the exchanger volume given to this zone.
    boilingIterations : int
        iterations of the boiling number loop, 0 without boiling.
    diagnostics : list
        non-convergence messages.
    """
    def __init__(self, index, heatTransferred, fractionBounds, regime, tempDiffLog):
        self.index = index
        self.heatTransferred = heatTransferred
        self.fractionBounds = fractionBounds
        self.regime = regime
        self.tempDiffLog = tempDiffLog
        self.heatTransferCoeff = {side: np.nan for side in Side}
        self.finEfficiency = {side: 1.0 for side in Side}
        self.area = {side: np.nan for side in Side}
        self.volume = {side: 0.0 for side in Side}
        self.mass = {side: 0.0 for side in Side}
        self.conductance = np.nan
        self.volumeShare = 0.0
        self.boilingIterations = 0
        self.diagnostics = []

    def __repr__(self):
        return (f"Zone({self.index}, Q={self.heatTransferred:g}, hot={self.regime[Side.HOT]}, "
                f"cold={self.regime[Side.COLD]}, DTlog={self.tempDiffLog:g})")

    def overallCoeff(self, side: Side):
        """
        Overall heat transfer coefficient referred to the area of one side in W/m^2/K.
        """
        return self.conductance/self.area[side]

    def swapRoles(self):
        """
        Returns a copy with hot and cold values exchanged and the duty fraction axis reversed.
        """
        swapped = copy(self)
        for attribute in ("regime", "heatTransferCoeff", "finEfficiency", "area", "volume", "mass"):
            values = getattr(self, attribute)
            setattr(swapped, attribute, {side: values[side.other] for side in Side})
        swapped.fractionBounds = (1.0 - self.fractionBounds[1], 1.0 - self.fractionBounds[0])
        swapped.diagnostics = list(self.diagnostics)
        return swapped

class CellSide():
    """
    Conditions of one stream over one cell of the profile.
    """
    def __init__(self, side: Side, stream, enthalpies, temperatures):
        self.side = side
        self.stream = stream
        self.enthalpies = enthalpies
        self.temperatures = temperatures
        self.enthalpyMean = 0.5*(enthalpies[0] + enthalpies[1])
        self.tempMean = 0.5*(temperatures[0] + temperatures[1])
        if stream.saturation is None:
            self.regime = ZoneType.LIQUID
        else:
            self.regime = stream.saturation.classifyEnthalpy(self.enthalpyMean)

    @property
    def qualityMean(self):
        saturation = self.stream.saturation
        return 0.5*(saturation.calculateQuality(self.enthalpies[0]) + saturation.calculateQuality(self.enthalpies[1]))

class BoilingCoefficient():
    """
    Heat transfer coefficient of a boiling stream, which depends on the boiling number.
    """
    def __init__(self, nusseltFunction, factor, massFluxEquivalent, enthalpyVaporization):
        self.nusseltFunction = nusseltFunction
        self.factor = factor
        self.massFluxEquivalent = massFluxEquivalent
        self.enthalpyVaporization = enthalpyVaporization

    def heatTransferCoeff(self, boilingNum):
        return self.nusseltFunction(boilingNum)*self.factor

class ConstantCoefficients():
    """
    Convective coefficients given per side and per regime.
    """
    def __init__(self, params: ExchangerParameters):
        params.requireSideFields("hConv")
        self.params = params

    def heatTransferCoeff(self, cell: CellSide, otherCell: CellSide):
        values = self.params.side(cell.side).hConv
        if cell.regime not in values:
            raise ConfigurationError(f"No convective coefficient given for regime {cell.regime} "
                                     f"on the {cell.side} side")
        return values[cell.regime]

class FlowDependentCoefficients():
    """
    Convective coefficients scaled from nominal values with the mass flow ratio,
    h = hNominal*(m/mNominal)^n.
    """
    def __init__(self, params: ExchangerParameters):
        params.requireSideFields("hConvNominal", "massFlowNominal", "exponents")
        self.params = params

    def heatTransferCoeff(self, cell: CellSide, otherCell: CellSide):
        sideParams = self.params.side(cell.side)
        if cell.regime not in sideParams.hConvNominal or cell.regime not in sideParams.exponents:
            raise ConfigurationError(f"No nominal coefficient or exponent given for regime {cell.regime} "
                                     f"on the {cell.side} side")
        flowRatio = cell.stream.massFlow/sideParams.massFlowNominal
        return sideParams.hConvNominal[cell.regime]*flowRatio**sideParams.exponents[cell.regime]

class CorrelationCoefficients():
    """
    Convective coefficients from empirical correlations. Correlation names are resolved into
    functions once, when the model is built.
    """
    def __init__(self, params: ExchangerParameters, streams):
        self.logger = logging.getLogger("ZoneEvaluator")
        params.requireSideFields("diameterHydraulic", "crossSection", "numChannels", "correlationSinglePhase")
        self.params = params
        self.geometry = {}
        self.singlePhase = {}
        self.twoPhase = {}
        self.boilingSide = None
        for side in Side:
            sideParams = params.side(side)
            self.geometry[side] = CorrelationGeometry(sideParams.diameterHydraulic, params.inclinationAngle,
                                                      params.corrugationPitch, params.enlargementFactor,
                                                      params.plateLength, sideParams.tubeLength,
                                                      sideParams.fin.tubeAreaRatio if sideParams.fin else None)
            self.singlePhase[side] = resolveCorrelation(sideParams.correlationSinglePhase,
                                                        [SINGLE_PHASE_CORRELATIONS], self.geometry[side])
            stream = streams[side]
            if stream.inputMode is InputMode.TEMPERATURE or not stream.fluid.isPhaseChanging(stream.pressure):
                continue
            if sideParams.correlationTwoPhase is None:
                raise ConfigurationError(f"{params.modelType} requires correlationTwoPhase on the {side} side")
            self.twoPhase[side] = resolveCorrelation(sideParams.correlationTwoPhase,
                                                     [CONDENSATION_CORRELATIONS, BOILING_CORRELATIONS],
                                                     self.geometry[side])
            if sideParams.correlationTwoPhase in BOILING_CORRELATIONS:
                if self.boilingSide is not None:
                    raise ConfigurationError("Only one side of the heat exchanger may use a boiling correlation")
                self.boilingSide = side

    def heatTransferCoeff(self, cell: CellSide, otherCell: CellSide):
        """
        Coefficient of one stream in one cell

        Parameters
        ----------
        cell : CellSide
            conditions of the stream.
        otherCell : CellSide
            conditions of the other stream, for the wall temperature.

        Returns
        -------
        float or BoilingCoefficient
            heat transfer coefficient in W/m^2/K, or its dependence on the boiling number.

        """
        sideParams = self.params.side(cell.side)
        massFlux = sideParams.massFlux(cell.stream.massFlow)
        geometry = self.geometry[cell.side]
        if cell.regime is not ZoneType.TWOPHASE:
            return self.singlePhaseCoeff(cell, massFlux, geometry)
        saturation = cell.stream.saturation
        densityMixture = cell.stream.fluid.calculateDensity(ThermoProps.HP, cell.enthalpyMean, cell.stream.pressure)
        state = TwoPhaseState(saturation, cell.qualityMean, massFlux, cell.tempMean,
                              0.5*(cell.tempMean + otherCell.tempMean), densityMixture)
        correlation = self.twoPhase[cell.side]
        if cell.side is self.boilingSide:
            return BoilingCoefficient(correlation(state, geometry),
                                      self.params.twoPhaseTuning*saturation.conductivityLiquid/geometry.diameterHydraulic,
                                      state.massFluxEquivalent, saturation.enthalpyVaporization)
        return correlation(state, geometry)*self.params.twoPhaseTuning

    def singlePhaseCoeff(self, cell: CellSide, massFlux, geometry):
        fluid, pressure = cell.stream.fluid, cell.stream.pressure
        if cell.stream.inputMode is InputMode.TEMPERATURE:
            viscosity, conductivity, heatCapacity = (
                fluid.calculateTemperatureAveraged(method, pressure, *cell.temperatures)
                for method in (fluid.calculateViscosity, fluid.calculateConductivity, fluid.calculateHeatCapacity))
        else:
            viscosity, conductivity, heatCapacity = (
                method(ThermoProps.HP, cell.enthalpyMean, pressure)
                for method in (fluid.calculateViscosity, fluid.calculateConductivity, fluid.calculateHeatCapacity))
        reynoldsNum = FluidMechanics.calculateReynoldsNumber(massFlux, geometry.diameterHydraulic, viscosity)
        prandtlNum = FluidMechanics.calculatePrandtlNumber(heatCapacity, viscosity, conductivity)
        nusseltNum = self.singlePhase[cell.side](reynoldsNum, prandtlNum, geometry)
        self.logger.debug("%s side: Re %g, Pr %g, Nu %g", cell.side, reynoldsNum, prandtlNum, nusseltNum,
                          extra={"methodname": self.singlePhaseCoeff.__name__})
        return nusseltNum*self.params.singlePhaseTuning*conductivity/geometry.diameterHydraulic

class ZoneEvaluator():
    """
    Turns a profile into zones. With a coefficient model, every zone also gets its convective
    coefficients, fin efficiencies, overall conductance and required area.
    """
    def __init__(self, builder, params: ExchangerParameters, coefficientModel=None):
        self.logger = logging.getLogger("ZoneEvaluator")
        self.builder = builder
        self.params = params
        self.coefficientModel = coefficientModel

    def cellSides(self, profile, index):
        return {Side.HOT: CellSide(Side.HOT, self.builder.hot, profile.enthalpyHot[index:index + 2],
                                   profile.tempHot[index:index + 2]),
                Side.COLD: CellSide(Side.COLD, self.builder.cold, profile.enthalpyCold[index:index + 2],
                                    profile.tempCold[index:index + 2])}

    def evaluateZones(self, profile):
        """
        Builds the zones of a profile

        Parameters
        ----------
        profile : Profile
            profile of both streams.

        Returns
        -------
        list of Zone
            zones from the hot outlet end to the hot inlet end.

        """
        tempDiffsLog = profile.logMeanTempDiffs()
        zones = []
        for index in range(profile.numCells):
            cells = self.cellSides(profile, index)
            zone = Zone(index, profile.heatVector[index], (profile.fractions[index], profile.fractions[index + 1]),
                        {side: cells[side].regime for side in Side}, tempDiffsLog[index])
            if self.coefficientModel is not None:
                self.evaluateTransfer(zone, cells)
            zones.append(zone)
        return zones

    def calculateConductance(self, heatTransferCoeffs):
        """
        Overall heat transfer coefficient referred to the hot side area, with both sides in
        series and each side corrected by its surface efficiency

        Returns
        -------
        overallCoeff : float
            overall heat transfer coefficient in W/m^2/K.
        efficiencies : dict
            surface efficiency of each side.

        """
        efficiencies = {side: calculateSurfaceEfficiency(heatTransferCoeffs[side], self.params.side(side).fin)
                        for side in Side}
        areaRatio = self.params.areaRatio()
        overallCoeff = 1/(1/(heatTransferCoeffs[Side.HOT]*efficiencies[Side.HOT])
                          + 1/(areaRatio*heatTransferCoeffs[Side.COLD]*efficiencies[Side.COLD]))
        return overallCoeff, efficiencies

    def evaluateTransfer(self, zone: Zone, cells):
        """
        Computes the coefficients and the required area of a zone. When one side boils, the
        boiling number is iterated from Bo = 1: each pass recomputes the coefficient, the
        overall conductance, the area of the boiling side and its heat flux.
        """
        if zone.heatTransferred <= 0.0:
            zone.area = {side: 0.0 for side in Side}
            zone.conductance = 0.0
            return
        coefficients = {side: self.coefficientModel.heatTransferCoeff(cells[side], cells[side.other])
                        for side in Side}
        boilingSide = next((side for side in Side if isinstance(coefficients[side], BoilingCoefficient)), None)
        areaRatio = self.params.areaRatio()
        if boilingSide is not None:
            boiling = coefficients[boilingSide]

            def updateBoilingNumber(boilingNum):
                trial = {**coefficients, boilingSide: boiling.heatTransferCoeff(boilingNum)}
                overallCoeff = self.calculateConductance(trial)[0]
                areaHot = zone.heatTransferred/(zone.tempDiffLog*overallCoeff)
                areaBoiling = areaHot if boilingSide is Side.HOT else areaHot*areaRatio
                heatFlux = zone.heatTransferred/areaBoiling
                return FluidMechanics.calculateBoilingNumber(heatFlux, boiling.massFluxEquivalent,
                                                             boiling.enthalpyVaporization)
            result = iterateFixedPoint(updateBoilingNumber, 1.0, 5e-2, 10)
            zone.boilingIterations = result.iterations
            if not result.converged:
                message = (f"Boiling number did not converge in zone {zone.index} "
                           f"(Bo {result.value:g}, relative change {result.residual:g})")
                self.logger.warning(message, extra={"methodname": self.evaluateTransfer.__name__})
                zone.diagnostics.append(message)
            coefficients[boilingSide] = boiling.heatTransferCoeff(result.value)
        overallCoeff, efficiencies = self.calculateConductance(coefficients)
        areaHot = zone.heatTransferred/(zone.tempDiffLog*overallCoeff)
        zone.heatTransferCoeff = coefficients
        zone.finEfficiency = efficiencies
        zone.area = {Side.HOT: areaHot, Side.COLD: areaHot*areaRatio}
        zone.conductance = zone.heatTransferred/zone.tempDiffLog
        self.logger.debug("zone %d: h %s, U %g, area hot %g", zone.index, coefficients, overallCoeff, areaHot,
                          extra={"methodname": self.evaluateTransfer.__name__})
