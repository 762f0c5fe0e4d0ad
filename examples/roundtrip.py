import numpy as np
from mpfloat import Float, FP64

A0 = np.random.randn(6) * 1000  # Random values around zero.

for base in (2, 10, 16, 36):
    # Render each value in the base and parse it back at the same precision.
    texts = [Float(float(x), precision=FP64).to_string(base) for x in A0]
    back = np.array([Float.from_string(t, base, precision=FP64).to_double() for t in texts])
    print("base %2d  max error = %g  sample = %s" % (base, np.max(np.abs(back - A0)), texts[0]))
