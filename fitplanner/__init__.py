"""
FitPlanner: AI-generated workout plans with weekly tracking.
"""
