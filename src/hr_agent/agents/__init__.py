"""Agent loop components for the HR agent.

This package contains the message model, the reasoning and tool steps, the
routing decision and the LangGraph engine that ties them together.
"""
