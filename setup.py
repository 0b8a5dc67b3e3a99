from setuptools import setup, find_packages

setup(
    name='theatre_anim_sdk',
    version='0.1.0',
    description='Skeletal animation clip retargeting and cross-fade playback',
    packages=find_packages(include=['theatre_anim_sdk', 'theatre_anim_sdk.*']),
    package_data={
        'theatre_anim_sdk': ['**/*.json'],
    },
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'scipy',
    ],
    extras_require={
        'test': ['pytest'],
        'examples': ['loop_rate_limiters'],
    },
)
