"""ImpactSim: asteroid impact and deflection simulator backend."""
