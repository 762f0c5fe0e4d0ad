import numpy as np
from mpfloat import Float, RoundingMode, FP16

# Create a random numpy array in the range [0,4)
A0 = np.random.rand(8) * 4

# Round every element to half precision with each deterministic mode.
modes = [mode for mode in RoundingMode if mode.is_deterministic]
for mode in modes:
    rounded = [Float(float(x), precision=FP16, rounding=mode).to_double() for x in A0]
    print("%-26s" % mode.name, np.array(rounded))

# NumPy's own half precision (round to nearest, ties to even).
print("%-26s" % "numpy float16", A0.astype(np.float16).astype(np.float64))
