"""instrumented reference service emitting correlated traces, logs and metrics"""

__version__ = "1.0.0"
