# scalemap: weighing-device inspection map (scales + weighbridges)

SCALE = "scale"
WEIGHBRIDGE = "weighbridge"
CATEGORIES = (SCALE, WEIGHBRIDGE)

__version__ = "0.1.0"
