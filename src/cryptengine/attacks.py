"""
Key recovery for textbook RSA, Diffie-Hellman and ElGamal with small parameters.

RSA is broken by factoring the modulus, the discrete logarithm schemes by
solving for the secret exponent.
"""

import logging
import re
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from cryptengine.engine import discrete_log, factorize
from cryptengine.ntheory import mod_inverse

logger = logging.getLogger(__name__)

_PEM_PUBLIC_KEY = re.compile(r"-----BEGIN (RSA )?PUBLIC KEY-----.*?-----END (RSA )?PUBLIC KEY-----", re.DOTALL)


@dataclass
class RSABreak:
    n: int
    e: int
    p: int
    q: int
    d: int
    m: int|None = None


@dataclass
class DiffieHellmanBreak:
    a: int
    shared_key: int


@dataclass
class ElGamalBreak:
    x: int
    m: int


######################
# RSA                #
######################

def break_rsa(n: int, e: int=65537, c: int|None=None, cancel_token=None, config=None) -> RSABreak:
    """
    Factor the RSA modulus n = p*q and derive the private exponent.

    :param n: Modulus, a product of two distinct primes.
    :param e: Public exponent.
    :param c: Optional ciphertext to decrypt.
    :return: RSABreak with p, q, d and, if c was given, m = c^d mod n.
    :raises InvalidInverse: if e is not invertible modulo (p-1)(q-1).
    """
    p, q = sorted(factorize(n, cancel_token=cancel_token, config=config))
    phi = (p - 1) * (q - 1)
    d = mod_inverse(e, phi)
    m = pow(c, d, n) if c is not None else None
    logger.info("RSA modulus %d broken: p = %d, q = %d", n, p, q)
    return RSABreak(n=n, e=e, p=p, q=q, d=d, m=m)

def read_modulus_from_pubkey(filename: str) -> int:
    """Modulus of the first PEM encoded RSA public key in the file."""
    with open(filename, "r") as f:
        content = f.read()
    match = _PEM_PUBLIC_KEY.search(content)
    if not match:
        raise ValueError(f"No valid public key found in {filename}.")
    pubkey = serialization.load_pem_public_key(match.group(0).encode())
    if not isinstance(pubkey, rsa.RSAPublicKey):
        raise ValueError(f"{filename} does not hold an RSA public key.")
    return pubkey.public_numbers().n

def rsa_private_key_pem(result: RSABreak) -> bytes:
    """Recovered key as a PEM encoded (traditional OpenSSL) private key."""
    private_numbers = rsa.RSAPrivateNumbers(
        p=result.p,
        q=result.q,
        d=result.d,
        dmp1=result.d % (result.p - 1),
        dmq1=result.d % (result.q - 1),
        iqmp=mod_inverse(result.q, result.p),
        public_numbers=rsa.RSAPublicNumbers(result.e, result.n),
    )
    private_key = private_numbers.private_key()
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )

##############################
# Discrete logarithm schemes #
##############################

def break_diffie_hellman(p: int, g: int, g_a: int, g_b: int, cancel_token=None, config=None) -> DiffieHellmanBreak:
    """
    Recover Alice's secret a from g^a and the shared key g^(ab) = (g^b)^a.
    """
    a = discrete_log(g, g_a, p, cancel_token=cancel_token, config=config)
    return DiffieHellmanBreak(a=a, shared_key=pow(g_b, a, p))

def break_elgamal(p: int, g: int, h: int, c1: int, c2: int, cancel_token=None, config=None) -> ElGamalBreak:
    """
    Recover the private key x from h = g^x and decrypt (c1, c2) as c2 * (c1^x)^-1.
    """
    x = discrete_log(g, h, p, cancel_token=cancel_token, config=config)
    shared = pow(c1, x, p)
    return ElGamalBreak(x=x, m=c2 * mod_inverse(shared, p) % p)
