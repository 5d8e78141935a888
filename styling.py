# styling.py v2.1
# Part of Project Adaptive Descent
# v2.1: "Import Without Side Effects"
# - Constants only. Console colors for optimizer status lines and the CLI,
#   plot colors and fonts for the convergence report.
# - No matplotlib import here: the optimizer pulls in this module through the
#   reporters, and must leave the caller's backend and style alone.

from termcolor import cprint

# --- Console Colors (using termcolor names) ---
# Usage: cprint("Hello", C.INFO)
class C:
    HEADER = 'magenta'
    SUBHEADER = 'cyan'
    SUCCESS = 'green'
    WARNING = 'yellow'
    ERROR = 'red'
    INFO = 'white'
    DEBUG = 'grey'
    BOLD_ATTR = ['bold']

# --- Matplotlib Plotting Styles ---
# Applied with `plt.style.context(PLOT_STYLE)` while a report is drawn.
PLOT_STYLE = 'dark_background'

FONT_SIZE_TITLE = 18
FONT_SIZE_LABEL = 12

# Objective history plot
COLOR_OBJECTIVE = '#00FFFF'   # Cyan
COLOR_TERMINATION = '#FFD700' # Gold, marks the epoch where the run stopped

if __name__ == "__main__":
    cprint("--- styling.py loaded ---", C.SUCCESS)
    cprint("Example usage:", C.SUBHEADER, attrs=C.BOLD_ATTR)
    cprint("  from styling import C, COLOR_OBJECTIVE", C.DEBUG)
