"""NMOS operating point through the ngspice shared library

Loads a small NMOS amplifier netlist, runs two operating-point analyses
with different transistor widths, then dumps every vector of every plot.

Circuit topology:
- R1: 10k load from VDD to drain
- M1: level-3 NMOS, W=10um then 20um, L=1um
- VDD = 5V, VGS = 2V

Run with libngspice installed (or NGSPICE_LIBRARY_PATH set).
"""

import logging

from ngshared import LoggingCallbacks, NgSpice

CIRCUIT = [
    ".title KiCad schematic",
    ".MODEL FAKE_NMOS NMOS (LEVEL=3 VTO=0.75)",
    ".save all @m1[gm] @m1[id] @m1[vgs] @m1[vds] @m1[vto]",
    "R1 /vdd /drain 10k",
    "M1 /drain /gate GND GND FAKE_NMOS W=10u L=1u",
    "V1 /vdd GND dc(5)",
    "V2 /gate GND dc(2)",
    ".end",
]


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    with NgSpice(LoggingCallbacks()) as spice:
        spice.circuit(CIRCUIT)
        spice.command("op")
        spice.command("alter m1 W=20u")
        spice.command("op")

        print(f"Current plot: {spice.current_plot()}")
        for plot in spice.all_plots():
            print(f"{plot}:")
            for name, info in spice.vectors(plot).items():
                if info.is_complex:
                    print(f"  {name:20s} (complex, not extracted)")
                else:
                    print(f"  {name:20s} {info.data}")


if __name__ == "__main__":
    main()
