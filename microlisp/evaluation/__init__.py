"""Evaluation: the trampolined evaluator, application and special forms."""
