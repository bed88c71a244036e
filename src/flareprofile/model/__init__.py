"""
The MODEL layer contains the curve families and the flare profile computer.
It has NO knowledge of the command line or of plotting beyond the optional
`plot()` helpers on the curves.
It deals with Fitting, Sampling and Units.
"""
