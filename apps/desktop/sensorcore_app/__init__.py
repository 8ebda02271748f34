"""SensorCore command line app."""
