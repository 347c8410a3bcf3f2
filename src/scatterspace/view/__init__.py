"""
The VIEW layer hands instance arrays and tables to the scene renderer.
"""
