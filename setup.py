from setuptools import setup, find_packages

setup(
    name='clockidup',
    version='0.4.0',
    description='A CLI tool that generates your standup entry from your Clockify time entries.',
    packages=find_packages(exclude=['tests']),
    install_requires=[
        'requests',
        'python-dotenv',
        'markdown',
        'PyYAML',
        'dateparser',
    ],
    entry_points={
        'console_scripts': [
            'clockidup=clockidup.__main__:main',
        ],
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
