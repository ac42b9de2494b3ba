# -*- coding: utf-8 -*-
"""
Created on Wed Oct  7 14:20:51 2026

@author: MBHEX
"""
import logging

logger = logging.getLogger("FixedPoint")

class FixedPointResult():
    """
    Outcome of a bounded fixed-point iteration.

    Attributes
    ----------
    value : float
        last iterate.
    converged : bool
        whether the relative change fell under the tolerance before the iteration cap.
    iterations : int
        number of updates performed.
    residual : float
        relative change of the last update.
    message : str
        diagnostic attached when the iteration did not converge or a fallback was used.
    """
    def __init__(self, value, converged, iterations, residual, message=None):
        self.value = value
        self.converged = converged
        self.iterations = iterations
        self.residual = residual
        self.message = message

    def __repr__(self):
        return (f"FixedPointResult(value={self.value:g}, converged={self.converged}, "
                f"iterations={self.iterations}, residual={self.residual:g})")

def iterateFixedPoint(update, initial, relTol, maxIter):
    """
    Iterates value = update(value) until the relative change is below relTol or maxIter
    updates have been performed.

    Parameters
    ----------
    update : callable
        function returning the next iterate from the current one.
    initial : float
        starting value.
    relTol : float
        relative change under which the iteration is converged.
    maxIter : int
        maximum number of updates.

    Returns
    -------
    FixedPointResult
        last iterate and convergence information.

    """
    value = initial
    residual = float('inf')
    for iteration in range(1, maxIter + 1):
        newValue = update(value)
        residual = abs(newValue - value)/abs(newValue) if newValue != 0 else abs(newValue - value)
        value = newValue
        logger.debug("iteration %d: %g (relative change %g)", iteration, value, residual,
                     extra={"methodname": iterateFixedPoint.__name__})
        if residual < relTol:
            return FixedPointResult(value, True, iteration, residual)
    return FixedPointResult(value, False, maxIter, residual)
