import warnings

from globeumap.pipeline import run

warnings.filterwarnings("ignore")

run()
