"""
Tests for the snake neuroevolution package.

This package contains tests for:
- Configuration validation
- The feed-forward network
- Mutation, crossover and selection operators
- The snake game agent
- Islands, population and the simulation driver
- The command line entry point
"""
