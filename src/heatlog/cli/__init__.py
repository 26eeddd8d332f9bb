"""Command line interface for heatlog"""
