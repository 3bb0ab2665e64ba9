"""Resolver package for GraphQL schema.

Functions here are referenced by the root query and mutation types and
delegate to the ``ServerService`` found in the GraphQL context.
"""
