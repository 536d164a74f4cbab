from setuptools import setup, find_packages
from glob import glob

package_name = 'show_runner'

setup(
    name='show-runner',
    version='1.0.0',
    packages=find_packages(exclude=['test', 'test.*']),
    data_files=[
        ('share/' + package_name + '/config', glob('config/*.yaml')),
        ('share/' + package_name + '/config/games', glob('config/games/*.yaml')),
    ],
    install_requires=['setuptools', 'pyyaml', 'flask', 'pydantic>=2'],
    extras_require={'test': ['pytest']},
    python_requires='>=3.10',
    zip_safe=True,
    maintainer='Show Runner',
    maintainer_email='show-runner@example.com',
    description='Party quiz show runner with two-team scoring and per-game play machines',
    license='MIT',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'show-runner = show_runner.console:main',
            'show-runner-server = show_runner.server:main',
        ],
    },
)
