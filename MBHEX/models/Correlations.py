# -*- coding: utf-8 -*-
import logging
import numpy as np
from scipy.constants import g
from MBHEX.models.Parameters import ConfigurationError

logger = logging.getLogger("Correlations")

class FluidMechanics():
    """
    Class for calculations of dimensionless numbers used to characterize fluids
    """
    def calculateReynoldsNumber(flowSpeed, length, viscosity, density=None):
        """
        Calculates the Reynolds number of a fluid given its flow speed, characteristic length,
        viscosity, and density. Without density, flowSpeed is taken as a mass flux.

        Parameters
        ----------
        flowSpeed : float
            flow speed of the fluid in m/s, or mass flux in kg/m^2/s if density is None.
        length : float
            characteristic length of the fluid in m.
        viscosity : float
            dynamic viscosity of the fluid in Pa*s.
        density : float, optional
            density of the fluid in kg/m^3. The default is None.

        Returns
        -------
        reynoldsNum: float
            Reynolds number of the fluid.

        """
        if not density:
            return flowSpeed*length/viscosity
        return density*flowSpeed*length/viscosity

    def calculatePrandtlNumber(specificHeat, viscosity, conductivity):
        return specificHeat*viscosity/conductivity

    def calculateEquivalentMassFlux(massFlux, quality, densityLiquid, densityVapor):
        """
        Mass flux of a liquid flow giving the same wall shear as the two-phase flow.
        """
        return massFlux*((1 - quality) + quality*np.sqrt(densityLiquid/densityVapor))

    def calculateBoilingNumber(heatFlux, massFlux, enthalpyVaporization):
        return heatFlux/(massFlux*enthalpyVaporization)

class CorrelationGeometry():
    """
    Geometry seen by the correlations of one side of the heat exchanger. Angles in rad,
    lengths in m.
    """
    def __init__(self, diameterHydraulic, inclinationAngle=None, corrugationPitch=None,
                 enlargementFactor=None, plateLength=None, tubeLength=None, tubeAreaRatio=None):
        self.diameterHydraulic = diameterHydraulic
        self.inclinationAngle = inclinationAngle
        self.corrugationPitch = corrugationPitch
        self.enlargementFactor = enlargementFactor
        self.plateLength = plateLength
        self.tubeLength = tubeLength
        self.tubeAreaRatio = tubeAreaRatio

def martinNusselt(reynoldsNum, prandtlNum, geometry):
    """
    Martin correlation for chevron plates of any corrugation angle

    Parameters
    ----------
    reynoldsNum : float
        Reynolds number.
    prandtlNum : float
        Prandtl number.
    geometry : CorrelationGeometry
        uses inclinationAngle.

    Returns
    -------
    float
        Nusselt number.

    """
    theta = geometry.inclinationAngle
    if reynoldsNum < 2000:
        friction0 = 16/reynoldsNum
        friction90 = 149.25/reynoldsNum + 0.9625
    else:
        friction0 = (1.56*np.log(reynoldsNum) - 3)**-2
        friction90 = 9.75/reynoldsNum**0.289
    friction = ((np.cos(theta)/np.sqrt(0.045*np.tan(theta) + 0.09*np.sin(theta) + friction0/np.cos(theta)))
                + (1 - np.cos(theta))/np.sqrt(3.8*friction90))**-0.5
    return 0.205*prandtlNum**(1/3)*(friction*reynoldsNum**2*np.sin(2*theta))**0.374

def wanniarachchiNusselt(reynoldsNum, prandtlNum, geometry):
    angle = 90 - np.degrees(geometry.inclinationAngle)
    nusseltTurbulent = 12.6*angle**-1.142*reynoldsNum**(0.646 + 0.00111*angle)
    nusseltLaminar = 3.65*angle**-0.455*reynoldsNum**-0.339
    return (nusseltLaminar**3 + nusseltTurbulent**3)**(1/3)*prandtlNum**(1/3)

# (upper angle bound in degrees, C, m)
THONON_COEFFICIENTS = [(15, 0.1, 0.687), (30, 0.2267, 0.631), (45, 0.2998, 0.645), (60, 0.2946, 0.7)]

def thononNusselt(reynoldsNum, prandtlNum, geometry):
    """
    Thonon correlation for chevron plates, tabulated up to 60 degrees.
    """
    angle = np.degrees(geometry.inclinationAngle)
    for angleMax, constant, exponent in THONON_COEFFICIENTS:
        if angle <= angleMax + 1e-9:
            return constant*reynoldsNum**exponent*prandtlNum**(1/3)
    raise ConfigurationError(f"Thonon correlation is not defined for angles above 60 degrees ({angle:g})")

def gnielinskiNusselt(reynoldsNum, prandtlNum, geometry):
    """
    Gnielinski correlation with the Konakov friction factor in turbulent flow, fully developed
    laminar flow below Re = 2300.
    """
    if reynoldsNum > 2300:
        return _gnielinskiTurbulent(reynoldsNum, prandtlNum)
    return 3.66

def gnielinskiShahNusselt(reynoldsNum, prandtlNum, geometry):
    """
    Gnielinski correlation in turbulent flow, Shah's thermally developing laminar flow
    below Re = 2300.
    """
    if reynoldsNum > 2300:
        return _gnielinskiTurbulent(reynoldsNum, prandtlNum)
    nusseltDeveloping = 1.953*(reynoldsNum*prandtlNum*geometry.diameterHydraulic/geometry.tubeLength)**(1/3)
    return (4.364**3 + 0.6**3 + (nusseltDeveloping - 0.6)**3)**(1/3)

def _gnielinskiTurbulent(reynoldsNum, prandtlNum):
    friction = (1.8*np.log10(reynoldsNum) - 1.5)**-2
    return (friction/8)*(reynoldsNum - 1000)*prandtlNum/(1 + 12.7*np.sqrt(friction/8)*(prandtlNum**(2/3) - 1))

def vdiFinnedTubesStaggeredNusselt(reynoldsNum, prandtlNum, geometry):
    """
    VDI correlation for staggered banks of finned tubes. The hydraulic diameter is the outer
    tube diameter and the mass flux is taken on the minimum free flow area.
    """
    return 0.38*reynoldsNum**0.6*prandtlNum**(1/3)*geometry.tubeAreaRatio**-0.15

SINGLE_PHASE_CORRELATIONS = {"Martin": martinNusselt,
                             "Wanniarachchi": wanniarachchiNusselt,
                             "Thonon": thononNusselt,
                             "Gnielinski": gnielinskiNusselt,
                             "Gnielinski_and_Sha": gnielinskiShahNusselt,
                             "VDI_finned_tubes_staggered": vdiFinnedTubesStaggeredNusselt}

class TwoPhaseState():
    """
    Local two-phase flow conditions of one side of a zone, shared by the condensation and
    boiling correlations.

    Parameters
    ----------
    saturation : SaturationProps
        saturated properties at the pressure of the stream.
    quality : float
        mean vapor quality of the zone.
    massFlux : float
        mass flux in kg/m^2/s.
    tempSat : float
        mean temperature of the stream in the zone in K.
    tempWall : float
        mean of both stream temperatures in the zone in K.
    densityMixture : float, optional
        density at the mean enthalpy of the zone in kg/m^3.
    """
    def __init__(self, saturation, quality, massFlux, tempSat, tempWall, densityMixture=None):
        self.saturation = saturation
        self.quality = min(max(quality, 1e-6), 1 - 1e-6)
        self.massFlux = massFlux
        self.massFluxEquivalent = FluidMechanics.calculateEquivalentMassFlux(
            massFlux, self.quality, saturation.densityLiquid, saturation.densityVapor)
        self.tempSat = tempSat
        self.tempWall = tempWall
        self.densityMixture = densityMixture

    @property
    def wallSuperheat(self):
        return max(abs(self.tempSat - self.tempWall), 1e-2)

def hanCondensation(state: TwoPhaseState, geometry: CorrelationGeometry):
    """
    Han condensation correlation for chevron plates

    Returns
    -------
    float
        heat transfer coefficient in W/m^2/K.

    """
    sat = state.saturation
    diameter = geometry.diameterHydraulic
    reynoldsEq = FluidMechanics.calculateReynoldsNumber(state.massFluxEquivalent, diameter, sat.viscosityLiquid)
    pitchRatio = geometry.corrugationPitch/diameter
    ge1 = 11.22*pitchRatio**-2.83*geometry.inclinationAngle**-4.5
    ge2 = 0.35*pitchRatio**0.23*geometry.inclinationAngle**1.48
    nusselt = ge1*reynoldsEq**ge2*sat.prandtlLiquid**(1/3)
    return nusselt*sat.conductivityLiquid/diameter

def longoCondensation(state: TwoPhaseState, geometry: CorrelationGeometry):
    """
    Longo condensation correlation for chevron plates: gravity controlled below an equivalent
    Reynolds number of 1600, forced convection above.
    """
    sat = state.saturation
    diameter = geometry.diameterHydraulic
    reynoldsEq = FluidMechanics.calculateReynoldsNumber(state.massFluxEquivalent, diameter, sat.viscosityLiquid)
    if reynoldsEq < 1600:
        return geometry.enlargementFactor*0.943*((sat.conductivityLiquid**3*sat.densityLiquid**2*g*sat.enthalpyVaporization)
                /(sat.viscosityLiquid*state.wallSuperheat*geometry.plateLength))**0.25
    return 1.875*geometry.enlargementFactor*sat.conductivityLiquid/diameter*reynoldsEq**0.445*sat.prandtlLiquid**(1/3)

def cavalliniCondensation(state: TwoPhaseState, geometry: CorrelationGeometry):
    """
    Cavallini condensation correlation inside tubes. The flow is temperature difference
    independent when the dimensionless vapor velocity exceeds its transition value, and
    stratified otherwise.
    """
    sat = state.saturation
    quality = state.quality
    diameter = geometry.diameterHydraulic
    rhoL, rhoV = sat.densityLiquid, sat.densityVapor
    muL, muV = sat.viscosityLiquid, sat.viscosityVapor
    constantT = 2.6
    martinelli = (muL/muV)**0.1*(rhoV/rhoL)**0.5*((1 - quality)/quality)**0.9
    velocityVapor = quality*state.massFlux/np.sqrt(g*diameter*rhoV*(rhoL - rhoV))
    velocityTransition = ((7.5/(4.3*martinelli**1.111 + 1))**-3 + constantT**-3)**(-1/3)
    reynoldsLiquid = FluidMechanics.calculateReynoldsNumber(state.massFlux, diameter, muL)
    heatTransferLiquidOnly = 0.023*reynoldsLiquid**0.8*sat.prandtlLiquid**0.4*sat.conductivityLiquid/diameter
    heatTransferIndependent = heatTransferLiquidOnly*(1 + 1.128*quality**0.817*(rhoL/rhoV)**0.3685
                                                      *(muL/muV)**0.2363*(1 - muV/muL)**2.144*sat.prandtlLiquid**-0.1)
    if velocityVapor > velocityTransition:
        return heatTransferIndependent
    heatTransferStratified = 0.725*(1 + 0.741*((1 - quality)/quality)**0.3321)**-1\
        *((sat.conductivityLiquid**3*rhoL*(rhoL - rhoV)*g*sat.enthalpyVaporization)
          /(muL*diameter*state.wallSuperheat))**0.25 + (1 - quality**0.087)*heatTransferLiquidOnly
    return velocityVapor/velocityTransition*(heatTransferIndependent*(velocityTransition/velocityVapor)**0.8
                                             - heatTransferStratified) + heatTransferStratified

def hanBoiling(state: TwoPhaseState, geometry: CorrelationGeometry):
    """
    Han boiling correlation for chevron plates

    Returns
    -------
    callable
        Nusselt number as a function of the boiling number.

    """
    sat = state.saturation
    diameter = geometry.diameterHydraulic
    reynoldsEq = FluidMechanics.calculateReynoldsNumber(state.massFluxEquivalent, diameter, sat.viscosityLiquid)
    pitchRatio = geometry.corrugationPitch/diameter
    ge1 = 2.81*pitchRatio**-0.041*geometry.inclinationAngle**-2.83
    ge2 = 0.746*pitchRatio**-0.082*geometry.inclinationAngle**0.61
    return lambda boilingNum: ge1*reynoldsEq**ge2*boilingNum**0.3*sat.prandtlLiquid**0.4

def amalfiBoiling(state: TwoPhaseState, geometry: CorrelationGeometry):
    """
    Amalfi boiling correlation for plates, split on the Bond number: Weber number based for
    Bd < 4, Reynolds number based otherwise.
    """
    sat = state.saturation
    diameter = geometry.diameterHydraulic
    surfaceTension = sat.surfaceTension
    rhoL, rhoV = sat.densityLiquid, sat.densityVapor
    bondNum = (rhoL - rhoV)*g*diameter**2/surfaceTension
    betaStar = geometry.inclinationAngle/np.radians(70)
    rhoStar = rhoL/rhoV
    if bondNum < 4:
        weberNum = state.massFlux**2*diameter/(state.densityMixture*surfaceTension)
        return lambda boilingNum: 982*betaStar**1.101*weberNum**0.315*boilingNum**0.32*rhoStar**-0.224
    reynoldsVapor = FluidMechanics.calculateReynoldsNumber(state.massFlux*state.quality, diameter, sat.viscosityVapor)
    reynoldsLiquidOnly = FluidMechanics.calculateReynoldsNumber(state.massFlux, diameter, sat.viscosityLiquid)
    return lambda boilingNum: 18.495*betaStar**0.248*reynoldsVapor**0.135*reynoldsLiquidOnly**0.351\
        *bondNum**0.235*boilingNum**0.198*rhoStar**-0.223

CONDENSATION_CORRELATIONS = {"Han_condensation": hanCondensation,
                             "Longo_condensation": longoCondensation,
                             "Cavallini_condensation": cavalliniCondensation}

BOILING_CORRELATIONS = {"Han_boiling": hanBoiling,
                        "Almalfi_boiling": amalfiBoiling}

# geometry fields each correlation reads, checked before solving
CORRELATION_REQUIREMENTS = {"Martin": ("inclinationAngle",),
                            "Wanniarachchi": ("inclinationAngle",),
                            "Thonon": ("inclinationAngle",),
                            "Gnielinski": (),
                            "Gnielinski_and_Sha": ("tubeLength",),
                            "VDI_finned_tubes_staggered": ("tubeAreaRatio",),
                            "Han_condensation": ("inclinationAngle", "corrugationPitch"),
                            "Longo_condensation": ("enlargementFactor", "plateLength"),
                            "Cavallini_condensation": (),
                            "Han_boiling": ("inclinationAngle", "corrugationPitch"),
                            "Almalfi_boiling": ("inclinationAngle",)}

def resolveCorrelation(name, tables, geometry: CorrelationGeometry):
    """
    Finds the correlation function for a name and checks that the geometry it needs is given

    Parameters
    ----------
    name : str
        correlation name.
    tables : list of dict
        correlation tables in which name is searched.
    geometry : CorrelationGeometry
        geometry the correlation will be called with.

    Raises
    ------
    ConfigurationError
        unknown name or missing geometry.

    Returns
    -------
    callable
        correlation function.

    """
    for table in tables:
        if name in table:
            break
    else:
        known = [key for table in tables for key in table]
        raise ConfigurationError(f"Unknown correlation '{name}'. Expected one of {known}")
    missing = [field for field in ("diameterHydraulic",) + CORRELATION_REQUIREMENTS[name]
               if getattr(geometry, field) is None]
    if missing:
        raise ConfigurationError(f"Correlation {name} requires {', '.join(missing)}")
    if name == "Thonon" and np.degrees(geometry.inclinationAngle) > 60 + 1e-9:
        raise ConfigurationError("Thonon correlation is only defined up to 60 degrees")
    logger.debug("resolved correlation %s", name, extra={"methodname": resolveCorrelation.__name__})
    return table[name]

def calculateFinEfficiency(heatTransferCoeff, fin):
    """
    Schmidt approximation of the efficiency of an annular fin

    The efficiency is tanh(m r phi)/(m r phi) with r the tube radius, as in the finned tube
    models. The equivalent radius only enters through phi; the m R_e form of the other
    formulation gives a different efficiency for the same fin.

    Parameters
    ----------
    heatTransferCoeff : float
        convective heat transfer coefficient on the fin in W/m^2/K.
    fin : FinGeometry
        fin description.

    Returns
    -------
    float
        fin efficiency.

    """
    mFactor = np.sqrt(2*heatTransferCoeff/(fin.conductivity*fin.thickness))
    phiFin = fin.finBase/fin.radius
    betaFin = fin.finHeight/fin.finBase
    radiusEquivalent = 1.27*fin.radius*phiFin*np.sqrt(betaFin - 0.3)
    phi = (radiusEquivalent/fin.radius - 1)*(1 + 0.35*np.log(radiusEquivalent/fin.radius))
    mrPhi = mFactor*fin.radius*phi
    if mrPhi < 1e-12:
        return 1.0
    return np.tanh(mrPhi)/mrPhi

def calculateSurfaceEfficiency(heatTransferCoeff, fin):
    """
    Overall surface efficiency of a finned side, 1 without fins.
    """
    if fin is None:
        return 1.0
    return 1 - fin.finnedAreaFraction*(1 - calculateFinEfficiency(heatTransferCoeff, fin))

def calculateLogMeanTempDiff(tempHotIn, tempHotOut, tempColdIn, tempColdOut):
    """
    Log mean temperature difference of a counter-flow cell. Both end differences are floored
    at 1e-2 K.

    Returns
    -------
    float
        log mean temperature difference in K.

    """
    deltaTempHot = max(tempHotIn - tempColdOut, 1e-2)
    deltaTempCold = max(tempHotOut - tempColdIn, 1e-2)
    if abs(deltaTempHot - deltaTempCold) < 1e-12:
        return deltaTempHot
    return (deltaTempHot - deltaTempCold)/np.log(deltaTempHot/deltaTempCold)
