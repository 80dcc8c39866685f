"""Shared configuration and schemas for the transitwire engine."""
