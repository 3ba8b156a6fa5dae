from pathlib import Path

PIPELINE_CONFIG_FILE = Path(__file__).parent / "pipeline_config.yaml"

DATA_DIR = Path(__file__).parent / 'data'

RAW_DATA_DIR = DATA_DIR / "01_raw"
SAMPLES_CSV_PATH = RAW_DATA_DIR / "samples.csv"

SPECTRA_DIR = DATA_DIR / "02_spectra"
SPECTRA_PRQ_PATH = SPECTRA_DIR / "spectra.parquet"
SPECTRA_SAMPLE_PLOT_PATH = SPECTRA_DIR / "spectra_sample.html"
