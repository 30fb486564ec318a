"""
L0 Data — Static package pins.

The pinned stack installed into every environment. Two entries are
computed at generation time and appear here as bare names:

- ``numpy``: pinned by the runtime's minor version
- ``gdal``: pinned to the detected native GDAL version

Everything else is an exact pin and opaque to the resolver.
"""

from __future__ import annotations

GDAL_PACKAGE = "gdal"
GDAL_DEFAULT_VERSION = "3.11.0"
GDAL_MODULE_HINT = "rh9/gdal/3.11.0"

NUMPY_PACKAGE = "numpy"
NUMPY_LEGACY_VERSION = "1.26.4"    # last release for Python 3.9/3.10
NUMPY_CURRENT_VERSION = "2.3.3"    # Python 3.11+
NUMPY_SPLIT_MINOR = 11

COMPUTED_PACKAGES: frozenset[str] = frozenset({GDAL_PACKAGE, NUMPY_PACKAGE})

# Installed with ``--upgrade`` before anything else
CORE_TOOLING: tuple[str, ...] = ("pip", "setuptools", "wheel", "cython")

# Installed one at a time when the bulk install fails
CRITICAL_PACKAGES: tuple[str, ...] = (
    "pandas",
    "xarray",
    "rasterio",
    "geopandas",
    "matplotlib",
    "scikit-learn",
    "netCDF4",
)

# Checked by import after installation
VERIFY_PACKAGES: tuple[str, ...] = (
    "numpy",
    "pandas",
    "xarray",
    "gdal",
    "rasterio",
    "netCDF4",
    "torch",
)

# Display name -> import path, where they differ
IMPORT_NAMES: dict[str, str] = {
    "gdal": "osgeo.gdal",
}

# Externally hosted source packages, pinned to exact revisions
GIT_PACKAGES: tuple[tuple[str, str], ...] = (
    (
        "octvi",
        "git+https://github.com/ritviksahajpal/octvi.git"
        "@7760ceb5c903f47d847c46240870e65780548e1b",
    ),
    (
        "pygeoutil",
        "git+https://github.com/ritviksahajpal/pygeoutil.git"
        "@29f1b2e1ba880d4f3bbc8a3bc710c89de2912b63",
    ),
)

# (section title, requirement lines)
MANIFEST_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Core dependencies - install first", (
        "numpy",
        "cython",
        "setuptools==80.9.0",
        "wheel",
    )),
    ("GDAL and geospatial packages", (
        "gdal",
        "fiona==1.10.1",
        "rasterio==1.4.3",
        "geopandas==1.1.1",
        "shapely==2.1.2",
        "pyproj==3.7.2",
        "cartopy==0.25.0",
        "pyogrio==0.11.1",
        "rtree==1.4.1",
    )),
    ("Climate and NetCDF packages", (
        "netcdf4==1.7.2",
        "h5netcdf==1.7.3",
        "xarray==2025.1.1",
        "cfgrib==0.9.15.1",
        "cftime==1.6.4.post1",
        "eccodes==2.44.0",
        "xclim==0.58.1",
    )),
    ("Data processing", (
        "pandas==2.3.3",
        "dask==2025.9.1",
        "bottleneck==1.6.0",
        "scipy==1.15.3",
        "statsmodels==0.14.5",
    )),
    ("Machine learning", (
        "scikit-learn==1.7.2",
        "torch==2.9.0",
        "catboost==1.2.8",
        "shap==0.49.1",
        "optuna==4.5.0",
    )),
    ("Visualization", (
        "matplotlib==3.10.7",
        "seaborn==0.13.2",
        "plotly==6.3.1",
        "scienceplots==2.1.1",
    )),
    ("Additional packages", (
        "affine==2.4.0",
        "aiofiles==25.1.0",
        "alembic==1.17.0",
        "annotated-types==0.7.0",
        "anyio==4.11.0",
        "arrow==1.3.0",
        "attrs==25.4.0",
        "azure-core==1.35.1",
        "azure-storage-blob==12.26.0",
        "backoff==2.2.1",
        "beautifulsoup4==4.14.2",
        "boltons==25.0.0",
        "boruta==0.4.3",
        "boto3==1.40.50",
        "botocore==1.40.50",
        "bravado==11.1.0",
        "bravado-core==6.1.1",
        "bs4==0.0.2",
        "cached-property==2.0.1",
        "cachetools==6.2.0",
        "cdsapi==0.7.7",
        "certifi==2025.10.5",
        "cf-xarray==0.10.9",
        "cffi==2.0.0",
        "chardet==5.2.0",
        "charset-normalizer==3.4.3",
        "click==8.3.0",
        "click-plugins==1.1.1.2",
        "cligj==0.7.2",
        "cloudpickle==3.1.1",
        "colorlog==6.10.1",
        "configobj==5.0.9",
        "contourpy==1.3.3",
        "cryptography==46.0.2",
        "cycler==0.12.1",
        "deprecated==1.2.18",
        "distro==1.9.0",
        "donfig==0.8.1.post1",
        "earthengine-api==1.6.13",
        "eccodeslib==2.44.0.5",
        "eckitlib==1.32.2.5",
        "ecmwf-datastores-client==0.4.0",
        "einops==0.8.1",
        "et-xmlfile==2.0.0",
        "eval-type-backport==0.2.2",
        "fckitlib==0.14.0.5",
        "filelock==3.20.0",
        "filetype==1.2.0",
        "findlibs==0.1.2",
        "flexcache==0.3",
        "flexparser==0.4",
        "fonttools==4.60.1",
        "fqdn==1.5.1",
        "fsspec==2025.9.0",
        "future==1.0.0",
        "geocif==0.2.88",
        "geographiclib==2.1",
        "geoprepare==0.6.17",
        "geopy==2.4.1",
        "gitdb==4.0.12",
        "gitpython==3.1.45",
        "google-api-core==2.27.0",
        "google-api-python-client==2.185.0",
        "google-auth==2.41.1",
        "google-auth-httplib2==0.2.0",
        "google-cloud-core==2.4.3",
        "google-cloud-storage==3.4.1",
        "google-crc32c==1.7.1",
        "google-resumable-media==2.7.2",
        "googleapis-common-protos==1.71.0",
        "graphviz==0.21",
        "greenlet==3.2.4",
        "h11==0.16.0",
        "h2==4.3.0",
        "h5py==3.14.0",
        "hf-xet==1.2.0",
        "hpack==4.1.0",
        "httpcore==1.0.9",
        "httplib2==0.31.0",
        "httpx==0.28.1",
        "huggingface-hub==1.1.2",
        "hyperframe==6.1.0",
        "idna==3.10",
        "imageio==2.37.0",
        "importlib-resources==6.5.2",
        "isodate==0.7.2",
        "isoduration==20.11.0",
        "jinja2==3.1.6",
        "jmespath==1.0.1",
        "joblib==1.5.2",
        "jsonpointer==3.0.0",
        "jsonref==1.1.0",
        "jsonschema==4.25.1",
        "jsonschema-specifications==2025.9.1",
        "kditransform==1.2.0",
        "kiwisolver==1.4.9",
        "lark==1.3.0",
        "lazy-loader==0.4",
        "llvmlite==0.45.1",
        "locket==1.0.0",
        "logzero==1.7.0",
        "mako==1.3.10",
        "markupsafe==3.0.3",
        "monotonic==1.6",
        "more-itertools==10.8.0",
        "mpmath==1.3.0",
        "msgpack==1.1.2",
        "multiurl==0.3.7",
        "narwhals==2.9.0",
        "neptune==1.14.0",
        "neptune-api==0.23.0",
        "neptune-scale==0.27.0",
        "networkx==3.5",
        "numba==0.62.1",
        "nvidia-cublas-cu12==12.8.4.1",
        "nvidia-cuda-cupti-cu12==12.8.90",
        "nvidia-cuda-nvrtc-cu12==12.8.93",
        "nvidia-cuda-runtime-cu12==12.8.90",
        "nvidia-cudnn-cu12==9.10.2.21",
        "nvidia-cufft-cu12==11.3.3.83",
        "nvidia-cufile-cu12==1.13.1.3",
        "nvidia-curand-cu12==10.3.9.90",
        "nvidia-cusolver-cu12==11.7.3.90",
        "nvidia-cusparse-cu12==12.5.8.93",
        "nvidia-cusparselt-cu12==0.7.1",
        "nvidia-nccl-cu12==2.27.5",
        "nvidia-nvjitlink-cu12==12.8.93",
        "nvidia-nvshmem-cu12==3.3.20",
        "nvidia-nvtx-cu12==12.8.90",
        "oauthlib==3.3.1",
        "openeo==0.45.0",
        "openpyxl==3.1.5",
        "packaging==25.0",
        "palettable==3.3.3",
        "pandas-flavor==0.7.0",
        "partd==1.4.2",
        "patsy==1.0.1",
        "pillow==11.3.0",
        "pingouin==0.5.5",
        "pint==0.25",
        "platformdirs==4.5.0",
        "pooch==1.8.2",
        "posthog==6.9.0",
        "proto-plus==1.26.1",
        "protobuf==6.32.1",
        "psutil==7.1.0",
        "pyarrow==21.0.0",
        "pyasn1==0.6.1",
        "pyasn1-modules==0.4.2",
        "pycparser==2.23",
        "pydantic==2.12.3",
        "pydantic-core==2.41.4",
        "pydantic-settings==2.11.0",
        "pyeogpr==2.4.7",
        "pyhdf==0.11.6",
        "pyjwt==2.10.1",
        "pykdtree==1.4.3",
        "pyl4c==0.18.1",
        "pymannkendall==1.4.3",
        "pyparsing==3.2.5",
        "pyresample==1.34.2",
        "pyshp==2.3.1",
        "pystac==1.14.1",
        "python-dateutil==2.9.0.post0",
        "python-dotenv==1.2.1",
        "pytz==2025.2",
        "pyyaml==6.0.3",
        "rasterstats==0.20.0",
        "referencing==0.36.2",
        "regionmask==0.13.0",
        "requests==2.32.5",
        "requests-oauthlib==2.0.0",
        "rfc3339-validator==0.1.4",
        "rfc3986-validator==0.1.1",
        "rfc3987-syntax==1.1.0",
        "rioxarray==0.19.0",
        "rpds-py==0.27.1",
        "rsa==4.9.1",
        "s3transfer==0.14.0",
        "scikit-image==0.25.2",
        "sentry-sdk==2.42.1",
        "simplejson==3.20.2",
        "six==1.17.0",
        "slicer==0.0.8",
        "smmap==5.0.2",
        "sniffio==1.3.1",
        "soupsieve==2.8",
        "sqlalchemy==2.0.44",
        "swagger-spec-validator==3.0.4",
        "sympy==1.14.0",
        "tabpfn==6.0.5",
        "tabpfn-common-utils==0.2.7",
        "tabulate==0.9.0",
        "tenacity==9.1.2",
        "threadpoolctl==3.6.0",
        "tifffile==2025.10.4",
        "toolz==1.0.0",
        "tqdm==4.67.1",
        "triton==3.5.0",
        "typer-slim==0.20.0",
        "types-python-dateutil==2.9.0.20251008",
        "typing-extensions==4.15.0",
        "typing-inspection==0.4.2",
        "tzdata==2025.2",
        "uri-template==1.3.0",
        "uritemplate==4.2.0",
        "urllib3==2.5.0",
        "wandb==0.22.2",
        "webcolors==24.11.1",
        "websocket-client==1.9.0",
        "wget==3.2",
        "wrapt==1.17.3",
        "yamale==6.0.0",
    )),
)
