"""
Utility package for the Agro Dashboard application: data shaping and charts.
"""
