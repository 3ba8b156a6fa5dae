import logging

from config import load_config
from spectrum_analysis import run_spectrum_analysis


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    config = load_config()
    run_spectrum_analysis(config)
