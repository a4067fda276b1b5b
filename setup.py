from setuptools import setup, find_packages
import os

current_path = os.path.dirname(os.path.abspath(__file__))
target_path = os.path.join(current_path, "src")


if __name__ == "__main__":
    setup(
        name='hpwhsim',
        version='0.1.0',
        description='Heat pump and resistance water heater simulation',
        package_dir={'': 'src'},
        packages=find_packages(where=target_path),
        python_requires='>=3.8',
        install_requires=[
            'numpy',
            'scipy',
        ],
        extras_require={
            'test': ['pytest'],
        },
    )
