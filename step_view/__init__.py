"""
StepView - step through a folder of images, deleting and touching them up
"""

__version__ = '1.0.0'
