from setuptools import find_packages, setup

APP = 'sshpick'
REQUIRES = [
    'textual>=0.47',
    'rich>=13',
]
EXTRAS = {
    'test': ['pytest>=7'],
}

setup(
    name=APP,
    version='0.3.0',
    description='Pick a host from your SSH config and connect to it',
    packages=find_packages(include=['sshpick', 'sshpick.*']),
    python_requires='>=3.8',
    install_requires=REQUIRES,
    extras_require=EXTRAS,
    entry_points={
        'console_scripts': [
            'sshpick=sshpick.tui:main',
        ],
    },
)
