# -*- coding: utf-8 -*-
"""
Created on Wed Oct  7 15:03:36 2026

@author: MBHEX

Void fraction correlations and the mass of fluid held in each zone of the heat exchanger.
"""
import logging
import numpy as np
from scipy.constants import g
from scipy.integrate import quad
from scipy.optimize import brentq
from MBHEX.calculations.FixedPoint import FixedPointResult, iterateFixedPoint
from MBHEX.models.Fluid import ThermoProps, ZoneType
from MBHEX.models.Parameters import ConfigurationError, InputMode, VoidFractionModel

logger = logging.getLogger("VoidFraction")

#Machine precision
machineEps = np.finfo(np.float64).eps

# fit of ln(Kh) as a polynomial in ln(Z), highest order first
HUGHMARK_COEFFICIENTS = [-0.010060658854755, 0.155594796014726, -0.870912508715887,
                         2.167004115373165, -2.224608445535130]

def homogeneousVoidFraction(quality, densityVapor, densityLiquid):
    """
    Void fraction of a two-phase flow without slip between the phases.
    """
    return slipVoidFraction(quality, densityVapor/densityLiquid)

def ziviVoidFraction(quality, densityVapor, densityLiquid):
    """
    Void fraction with the Zivi slip ratio S = (rho_l/rho_v)^(1/3).
    """
    slipRatio = (densityLiquid/densityVapor)**(1/3)
    return slipVoidFraction(quality, slipRatio*densityVapor/densityLiquid)

def slipVoidFraction(quality, slipFactor):
    """
    Void fraction alpha = 1/(1 + c*(1 - x)/x) where c is the slip ratio times the vapor to
    liquid density ratio.
    """
    if quality <= 0.0:
        return 0.0
    if quality >= 1.0:
        return 1.0
    return 1/(1 + slipFactor*(1 - quality)/quality)

def averageSlipVoidFraction(qualityIn, qualityOut, slipFactor):
    """
    Mean of slipVoidFraction over a quality interval, from the closed form integral.

    Parameters
    ----------
    qualityIn : float
        quality at one end of the interval.
    qualityOut : float
        quality at the other end of the interval.
    slipFactor : float
        slip ratio times vapor to liquid density ratio.

    Raises
    ------
    ValueError
        one of the qualities is outside of [0, 1].

    Returns
    -------
    float
        mean void fraction.

    """
    xMin, xMax = min(qualityIn, qualityOut), max(qualityIn, qualityOut)
    if xMin + 5*machineEps < 0 or xMax - 10*machineEps > 1.0:
        raise ValueError(f'Quality must be between 0 and 1, xMin: {xMin}, xMax: {xMax}')
    if xMax - xMin < 1e-12:
        return slipVoidFraction(xMin, slipFactor)
    if abs(slipFactor - 1.0) < 1e-9:
        return 0.5*(xMin + xMax)
    cVal = slipFactor
    return -(cVal*(np.log(((xMax - 1.0)*cVal - xMax)/((xMin - 1.0)*cVal - xMin)) + xMax - xMin)
             - xMax + xMin)/(cVal**2 - 2*cVal + 1)/(xMax - xMin)

def hughmarkVoidFraction(quality, densityVapor, densityLiquid, viscosityVapor, viscosityLiquid,
                         diameter, massFlux):
    """
    Hughmark void fraction. The flow parameter Kh depends on the void fraction through the
    mixture viscosity, so the void fraction is found by fixed-point iteration (1% relative
    change, 10 iterations), then by a root search on [0, 1]. If the residual is still larger
    than 5e-2 or not finite, or if there is no flow, the flow is taken as fully vapor and the
    result carries a diagnostic.

    Parameters
    ----------
    quality : float
        vapor quality, clipped to [0.001, 0.99].
    densityVapor, densityLiquid : float
        saturated densities in kg/m^3.
    viscosityVapor, viscosityLiquid : float
        saturated viscosities in Pa*s.
    diameter : float
        hydraulic diameter in m.
    massFlux : float
        mass flux in kg/m^2/s.

    Returns
    -------
    FixedPointResult
        void fraction and convergence information.

    """
    qualityClipped = max(0.001, min(0.99, quality))
    if massFlux <= 0.0:
        message = f"Hughmark void fraction undefined without flow (G {massFlux:g}), assuming alpha = 1"
        logger.warning(message, extra={"methodname": hughmarkVoidFraction.__name__})
        return FixedPointResult(1.0, False, 0, np.nan, message)
    beta = homogeneousVoidFraction(qualityClipped, densityVapor, densityLiquid)
    froudeTerm = ((1/(g*diameter))*(massFlux*qualityClipped/(densityVapor*beta*(1 - beta)))**2)**(1/8)

    def update(alpha):
        reynoldsTerm = (diameter*massFlux/(viscosityLiquid + alpha*(viscosityVapor - viscosityLiquid)))**(1/6)
        lnKh = np.polyval(HUGHMARK_COEFFICIENTS, np.log(reynoldsTerm*froudeTerm))
        return np.exp(lnKh)*beta

    def residual(alpha):
        return alpha - update(alpha)

    result = iterateFixedPoint(update, beta, 1e-2, 10)
    if result.converged and np.isfinite(result.value):
        return result
    alpha = result.value
    try:
        alpha = brentq(residual, 0.0, 1.0, xtol=1e-8)
    except ValueError:
        logger.debug("no sign change of the Hughmark residual on [0, 1]",
                     extra={"methodname": hughmarkVoidFraction.__name__})
    finalResidual = residual(alpha)
    if not abs(finalResidual) <= 5e-2:
        message = (f"Hughmark void fraction did not converge (residual {finalResidual:g}, "
                   f"quality {qualityClipped:g}, beta {beta:g}, G {massFlux:g}), assuming alpha = 1")
        logger.warning(message, extra={"methodname": hughmarkVoidFraction.__name__})
        return FixedPointResult(1.0, False, result.iterations, abs(finalResidual), message)
    return FixedPointResult(alpha, True, result.iterations, abs(finalResidual))

def averageVoidFraction(model: VoidFractionModel, qualityIn, qualityOut, saturation,
                        diameter=None, massFlux=None):
    """
    Mean void fraction over a quality interval

    Parameters
    ----------
    model : VoidFractionModel
        void fraction correlation.
    qualityIn, qualityOut : float
        qualities at the ends of the interval.
    saturation : SaturationProps
        saturated properties of the fluid.
    diameter : float, optional
        hydraulic diameter in m, needed by Hughmark.
    massFlux : float, optional
        mass flux in kg/m^2/s, needed by Hughmark.

    Returns
    -------
    alphaAverage : float
        mean void fraction.
    diagnostics : list of str
        messages of Hughmark evaluations that fell back to alpha = 1.

    """
    densityRatio = saturation.densityVapor/saturation.densityLiquid
    match model:
        case VoidFractionModel.HOMOGENEOUS:
            return averageSlipVoidFraction(qualityIn, qualityOut, densityRatio), []
        case VoidFractionModel.ZIVI:
            slipFactor = densityRatio**(2/3)
            return averageSlipVoidFraction(qualityIn, qualityOut, slipFactor), []
        case VoidFractionModel.HUGHMARK:
            if diameter is None or massFlux is None:
                raise ConfigurationError("Hughmark void fraction requires the hydraulic diameter and mass flux")
            diagnostics = []

            def alpha(quality):
                result = hughmarkVoidFraction(quality, saturation.densityVapor, saturation.densityLiquid,
                                              saturation.viscosityVapor, saturation.viscosityLiquid,
                                              diameter, massFlux)
                if result.message and result.message not in diagnostics:
                    diagnostics.append(result.message)
                return result.value
            if abs(qualityOut - qualityIn) < 1e-12:
                return alpha(qualityIn), diagnostics
            integral = quad(alpha, qualityIn, qualityOut, limit=20)[0]
            return integral/(qualityOut - qualityIn), diagnostics
        case _:
            raise ConfigurationError(f"Unknown void fraction model {model}")

def calculateTwoPhaseMass(volume, alphaAverage, saturation):
    """
    Mass in a two-phase zone from the mean void fraction: the mean liquid fraction (1 - alpha)
    weights the liquid density and the mean void fraction weights the vapor density.
    """
    return volume*(saturation.densityLiquid*(1 - alphaAverage) + saturation.densityVapor*alphaAverage)

def calculateZoneMass(stream, sideParams, volume, enthalpies, temperatures, regime):
    """
    Mass of one stream held in one zone

    A side with alphaMass set uses it in place of the mean void fraction of whichever model is
    selected, and the mass still weights the saturated densities. It does not weight the
    densities at the two ends of the zone.

    Parameters
    ----------
    stream : StreamConditions
        derived state of the stream.
    sideParams : SideParameters
        parameters of the stream side, for void fraction model and flow geometry.
    volume : float
        volume of the zone on this side in m^3.
    enthalpies : tuple of float
        enthalpies at both ends of the zone in J/kg.
    temperatures : tuple of float
        temperatures at both ends of the zone in K.
    regime : ZoneType
        phase regime of the stream in the zone.

    Returns
    -------
    mass : float
        mass in kg.
    diagnostics : list of str
        messages from the void fraction model.

    """
    if volume == 0.0:
        return 0.0, []
    fluid, pressure = stream.fluid, stream.pressure
    if stream.inputMode is InputMode.TEMPERATURE:
        density = fluid.calculateTemperatureAveraged(fluid.calculateDensity, pressure, *temperatures)
        return volume*density, []
    if regime is not ZoneType.TWOPHASE or stream.saturation is None:
        densities = [fluid.calculateDensity(ThermoProps.HP, enthalpy, pressure) for enthalpy in enthalpies]
        return volume*0.5*(densities[0] + densities[1]), []
    saturation = stream.saturation
    qualityIn, qualityOut = (saturation.calculateQuality(enthalpy) for enthalpy in enthalpies)
    if sideParams.alphaMass is not None:
        alphaAverage, diagnostics = sideParams.alphaMass, []
    else:
        massFlux = sideParams.massFlux(stream.massFlow) if sideParams.hasFlowGeometry() else None
        alphaAverage, diagnostics = averageVoidFraction(sideParams.voidFraction, qualityIn, qualityOut,
                                                        saturation, sideParams.diameterHydraulic, massFlux)
    logger.debug("zone quality %g to %g, mean void fraction %g", qualityIn, qualityOut, alphaAverage,
                 extra={"methodname": calculateZoneMass.__name__})
    return calculateTwoPhaseMass(volume, alphaAverage, saturation), diagnostics
