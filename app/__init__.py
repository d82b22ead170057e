"""
FastAPI Application Package

Contains the FastAPI application factory, market routes and response envelopes.
"""
