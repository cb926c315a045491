##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
import os
import sys
from glob import glob

import pytest
from _pytest.tmpdir import TempPathFactory

from tabula.mapping.descriptor import clear_descriptor_cache
from tests.fixture_types import FixtureCallable, FixtureModification, FixtureStr


# pylint: disable=redefined-outer-name


#######################################
# Loading in Module Specific Fixtures #
#######################################

fixture_glob = os.path.join("tests", "fixtures", "**", "*.py")
pytest_plugins = [
    fixture_file.replace(os.sep, ".").replace(".py", "")
    for fixture_file in glob(fixture_glob, recursive=True)
    if not fixture_file.endswith("__init__.py")
]


#######################################
######### Fixture Definitions #########
#######################################


@pytest.fixture(scope="session")
def create_testing_dir() -> FixtureCallable:
    """
    Fixture to create a temporary testing directory.

    Returns:
        A function that creates the testing directory.
    """

    def _create_testing_dir(base_dir: str, sub_dir: str) -> str:
        """
        Helper function to create a temporary testing directory.

        Args:
            base_dir: The base directory where the testing directory will be created.
            sub_dir: The name of the subdirectory to create.

        Returns:
            The path to the created testing directory.
        """
        testing_dir = os.path.join(base_dir, sub_dir)
        if not os.path.exists(testing_dir):
            os.makedirs(testing_dir)  # Use makedirs to create intermediate directories if needed
        return testing_dir

    return _create_testing_dir


@pytest.fixture(scope="session")
def temp_output_dir(tmp_path_factory: TempPathFactory) -> FixtureStr:
    """
    This fixture will create a temporary directory to store output files of tests.
    The temporary directory will be stored at /tmp/`whoami`/pytest-of-`whoami`/. There can be at most
    3 temp directories in this location so upon the 4th test run, the 1st temp directory will be removed.

    Args:
        tmp_path_factory: A built in factory with pytest to help create temp paths for testing.

    Returns:
        The path to the temp output directory we'll use for this test run.
    """
    temp_dir = tmp_path_factory.mktemp(
        f"python_{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}_"
    )
    return str(temp_dir)


@pytest.fixture(autouse=True)
def fresh_descriptor_cache() -> FixtureModification:
    """
    Empty the descriptor cache around every test so that record types defined
    inside one test can never leak a cached descriptor into another.
    """
    clear_descriptor_cache()
    yield
    clear_descriptor_cache()
