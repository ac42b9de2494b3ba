# -*- coding: utf-8 -*-
"""
Created on Tue Oct  6 08:41:09 2026

@author: MBHEX
"""
from copy import copy
from enum import StrEnum
import numpy as np
from MBHEX.models.Fluid import Fluid, ZoneType

class ConfigurationError(ValueError):
    """
    Raised for structural problems with a solver call: unknown model type or correlation,
    missing parameters for the selected model, or an unsupported input mode.
    """

class Side(StrEnum):
    HOT = "Hot"
    COLD = "Cold"

    @property
    def other(self):
        return Side.COLD if self is Side.HOT else Side.HOT

class InputMode(StrEnum):
    """
    How the supply state of a stream is given: by enthalpy (H) or by temperature (T).
    Temperature mode streams never change phase.
    """
    ENTHALPY = "H"
    TEMPERATURE = "T"

class ModelType(StrEnum):
    """
    Closure law used to find the heat duty of the heat exchanger.
    """
    CSTPINCH = "CstPinch"
    CSTEFF = "CstEff"
    POLEFF = "PolEff"
    HCONVCST = "hConvCst"
    HCONVVAR = "hConvVar"
    HCONVCOR = "hConvCor"

class VoidFractionModel(StrEnum):
    HOMOGENEOUS = "Homogenous"
    ZIVI = "Zivi"
    HUGHMARK = "Hughmark"

def parseEnum(enumClass, value, description):
    """
    Converts a string tag into a member of enumClass

    Raises
    ------
    ConfigurationError
        value is not one of the enum values.

    """
    try:
        return enumClass(value)
    except ValueError as error:
        raise ConfigurationError(f"Unknown {description} '{value}'. Expected one of "
                                 f"{[member.value for member in enumClass]}") from error

class StreamState():
    """
    Supply state of one stream.

    Parameters
    ----------
    fluid : Fluid
        fluid flowing in the stream.
    pressure : float
        supply pressure in Pa.
    inletValue : float
        supply enthalpy in J/kg or supply temperature in K, depending on inputMode.
    massFlow : float
        mass flow rate in kg/s.
    inputMode : InputMode or str
        H or T.
    """
    def __init__(self, fluid: Fluid, pressure: float, inletValue: float, massFlow: float,
                 inputMode: InputMode | str=InputMode.ENTHALPY):
        self.fluid = fluid
        self.pressure = pressure
        self.inletValue = inletValue
        self.massFlow = massFlow
        self.inputMode = parseEnum(InputMode, inputMode, "stream input mode")

    def __repr__(self):
        return f"StreamState({self.fluid!r}, P={self.pressure:g}, {self.inputMode}={self.inletValue:g}, m={self.massFlow:g})"

class FinGeometry():
    """
    Annular fin description used by the fin efficiency correction.

    Parameters
    ----------
    conductivity : float
        fin material conductivity in W/m/K.
    thickness : float
        fin thickness in m.
    radius : float
        tube outer radius in m.
    finBase : float
        fin base dimension (B) in m.
    finHeight : float
        fin height dimension (H) in m.
    finnedAreaFraction : float
        fraction of the side area made of fins (omega_f).
    tubeAreaRatio : float, optional
        ratio of finned to bare tube area (omega_t), needed by finned tube bank correlations.
    """
    def __init__(self, conductivity: float, thickness: float, radius: float, finBase: float,
                 finHeight: float, finnedAreaFraction: float, tubeAreaRatio: float=None):
        self.conductivity = conductivity
        self.thickness = thickness
        self.radius = radius
        self.finBase = finBase
        self.finHeight = finHeight
        self.finnedAreaFraction = finnedAreaFraction
        self.tubeAreaRatio = tubeAreaRatio

class SideParameters():
    """
    Every parameter of the heat exchanger that belongs to one of the two streams. Swapping the
    roles of the streams swaps two of these blocks.
    """
    def __init__(self, areaTotal: float=None, volumeTotal: float=0.0, diameterHydraulic: float=None,
                 crossSection: float=None, numChannels: float=None, tubeLength: float=None,
                 fin: FinGeometry=None, correlationSinglePhase: str=None,
                 correlationTwoPhase: str=None, voidFraction: VoidFractionModel | str=VoidFractionModel.HOMOGENEOUS,
                 hConv: dict=None, hConvNominal: dict=None, massFlowNominal: float=None,
                 exponents: dict=None, alphaMass: float=None):
        self.areaTotal = areaTotal
        self.volumeTotal = volumeTotal
        self.diameterHydraulic = diameterHydraulic
        self.crossSection = crossSection
        self.numChannels = numChannels
        self.tubeLength = tubeLength
        self.fin = fin
        self.correlationSinglePhase = correlationSinglePhase
        self.correlationTwoPhase = correlationTwoPhase
        self.voidFraction = parseEnum(VoidFractionModel, voidFraction, "void fraction model")
        self.hConv = _regimeDict(hConv)
        self.hConvNominal = _regimeDict(hConvNominal)
        self.massFlowNominal = massFlowNominal
        self.exponents = _regimeDict(exponents)
        self.alphaMass = alphaMass

    def massFlux(self, massFlow):
        return massFlow/(self.numChannels*self.crossSection)

    def hasFlowGeometry(self):
        return None not in (self.diameterHydraulic, self.crossSection, self.numChannels)

def _regimeDict(values):
    """
    Accepts a single number for every regime, or a dict keyed by regime ('liq', 'tp', 'vap').
    """
    if values is None:
        return None
    if isinstance(values, dict):
        return {parseEnum(ZoneType, regime, "zone type"): value for regime, value in values.items()}
    return {regime: values for regime in ZoneType}

class ExchangerParameters():
    """
    Heat exchanger description. Fields that depend on the role of the stream live in the hot
    and cold SideParameters, fields shared by both streams live here.

    Parameters
    ----------
    modelType : ModelType or str
        closure law used to find the duty.
    hot, cold : SideParameters
        stream dependent parameters.
    pinch : float
        target pinch in K (CstPinch).
    effectiveness : float
        constant effectiveness (CstEff).
    polynomialCoefficients : list
        six coefficients of the effectiveness polynomial in normalized mass flows (PolEff).
    areaTotal : float
        if given, total area of both sides in m^2.
    inclinationAngle : float
        chevron angle of plate corrugations in rad.
    corrugationPitch : float
        corrugation pitch in m.
    enlargementFactor : float
        ratio of the corrugated area to the projected plate area.
    plateLength : float
        plate length between ports in m.
    numTwoPhaseCells : int
        number of equal enthalpy cells in each two-phase range.
    singlePhaseTuning, twoPhaseTuning : float
        multipliers of the single phase and two-phase correlations.
    generateTS : bool
        build the temperature-entropy trace.
    """
    def __init__(self, modelType: ModelType | str, hot: SideParameters=None, cold: SideParameters=None,
                 pinch: float=None, effectiveness: float=None, polynomialCoefficients=None,
                 areaTotal: float=None, inclinationAngle: float=None, corrugationPitch: float=None,
                 enlargementFactor: float=None, plateLength: float=None, numTwoPhaseCells: int=2,
                 singlePhaseTuning: float=1.0, twoPhaseTuning: float=1.0, generateTS: bool=True):
        self.modelType = parseEnum(ModelType, modelType, "model type")
        self.hot = hot or SideParameters()
        self.cold = cold or SideParameters()
        self.pinch = pinch
        self.effectiveness = effectiveness
        self.polynomialCoefficients = None if polynomialCoefficients is None else list(polynomialCoefficients)
        if areaTotal is not None:
            self.hot, self.cold = copy(self.hot), copy(self.cold)
            self.hot.areaTotal = areaTotal
            self.cold.areaTotal = areaTotal
        self.inclinationAngle = inclinationAngle
        self.corrugationPitch = corrugationPitch
        self.enlargementFactor = enlargementFactor
        self.plateLength = plateLength
        self.numTwoPhaseCells = int(numTwoPhaseCells)
        self.singlePhaseTuning = singlePhaseTuning
        self.twoPhaseTuning = twoPhaseTuning
        self.generateTS = generateTS

    def side(self, side: Side) -> SideParameters:
        return self.hot if side is Side.HOT else self.cold

    def swapped(self):
        """
        Returns a copy with the hot and cold roles exchanged. The effectiveness polynomial is
        reordered so that it keeps its meaning in the exchanged roles.
        """
        coefficients = self.polynomialCoefficients
        if coefficients is not None:
            coefficients = [coefficients[index] for index in (0, 2, 1, 5, 4, 3)]
        return ExchangerParameters(self.modelType, hot=self.cold, cold=self.hot, pinch=self.pinch,
                                   effectiveness=self.effectiveness,
                                   polynomialCoefficients=coefficients,
                                   inclinationAngle=self.inclinationAngle,
                                   corrugationPitch=self.corrugationPitch,
                                   enlargementFactor=self.enlargementFactor,
                                   plateLength=self.plateLength,
                                   numTwoPhaseCells=self.numTwoPhaseCells,
                                   singlePhaseTuning=self.singlePhaseTuning,
                                   twoPhaseTuning=self.twoPhaseTuning,
                                   generateTS=self.generateTS)

    def requireFields(self, *names):
        """
        Raises ConfigurationError if one of the shared fields is missing.
        """
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise ConfigurationError(f"{self.modelType} requires {', '.join(missing)}")

    def requireSideFields(self, *names):
        """
        Raises ConfigurationError if one of the stream dependent fields is missing on a side.
        """
        for side in Side:
            missing = [name for name in names if getattr(self.side(side), name) is None]
            if missing:
                raise ConfigurationError(f"{self.modelType} requires {', '.join(missing)} on the {side} side")

    def areaRatio(self):
        """
        Cold side area over hot side area.
        """
        return self.cold.areaTotal/self.hot.areaTotal

def clampEffectiveness(effectiveness):
    return float(np.clip(effectiveness, 1e-5, 1.0))
