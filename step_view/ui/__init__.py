"""Tkinter front end for StepView."""
