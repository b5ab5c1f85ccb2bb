"""
Command line interface of the cryptanalysis engine.

Run with `python run.py -h` from the repository root, `python -m cryptengine -h`,
or the installed `cryptengine` script.

Modes:
>   factor          split --number (or a generated --bits composite)
>   dlog            solve g^x = a (mod n) for -g, -a and --number
>   rsa             factor an RSA modulus (--number or --pubkey) and derive d
>   list_methods    list the factorization and discrete logarithm methods
>   gen_composite   print a --bits composite N = p*q
"""

import argparse
import logging
import sys
import time

from cryptengine import dloglib, factorlib
from cryptengine.attacks import break_rsa, read_modulus_from_pubkey, rsa_private_key_pem
from cryptengine.config import EngineConfig
from cryptengine.engine import discrete_log, factorize
from cryptengine.errors import CryptanalysisError

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def get_composite(bits: int, verbose: bool=True) -> int:
    """Product of two random primes with bits // 2 and bits - bits // 2 bits."""
    import Crypto.Util.number as number

    _validate_bits(bits)

    p = number.getPrime(bits // 2)
    q = number.getPrime(bits // 2 + (1 if bits % 2 else 0))
    N = p * q
    if verbose:
        print(f"Generated {N.bit_length()}-bit / {len(str(N))}-digit composite\n| {N} = \n| {p} \n|  * \n| {q}")
    return N

def _validate_bits(bits: int):
    if 6 < bits < 70:
        pass
    elif 70 <= bits <= 4096:
        print(f"Warning! {bits} bits is beyond the internal methods, factoring will fail.", file=sys.stderr)
    else:
        raise ValueError("Error: --bits must be at least 7, and not too large.")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cryptengine",
                                     description="Factor integers and solve discrete logarithms.")
    parser.add_argument("mode", choices=["factor", "dlog", "rsa", "list_methods", "gen_composite"],
                        help="'factor' to factor a number, 'dlog' to solve g^x = a (mod n), 'rsa' to break an RSA modulus, "
                             "'list_methods' to list available methods, 'gen_composite' to generate a composite number N = p*q.")
    parser.add_argument("-n", "-N", "--number", type=int, default=None,
                        help="Number to factor, or the prime modulus for 'dlog' (overrides --bits).")
    parser.add_argument("-b", "--bits", type=int, default=None,
                        help="Number of bits of the composite number to generate (incompatible with --number).")
    parser.add_argument("-g", "--generator", type=int, default=None,
                        help="Base g for 'dlog'.")
    parser.add_argument("-a", "--target", type=int, default=None,
                        help="Target a for 'dlog'.")
    parser.add_argument("-M", "--method", type=str, default=None,
                        help="Force a method by name instead of choosing by size (see 'list_methods').")
    parser.add_argument("-e", "--e", type=int, default=65537,
                        help="RSA public exponent (default: 65537).")
    parser.add_argument("-c", "--ciphertext", type=int, default=None,
                        help="RSA ciphertext to decrypt after the key is recovered.")
    parser.add_argument("--pubkey", type=str, default=None,
                        help="Path to PEM-formatted RSA public key file (incompatible with --number).")
    parser.add_argument("--outfile", type=str, default=None,
                        help="Output file for the recovered RSA private key.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log at INFO level.")
    parser.add_argument("-vv", "--very-verbose", action="store_true",
                        help="Log at DEBUG level.")
    parser.add_argument("-t", "--timing", action="store_true",
                        help="Print the time taken.")
    parser.add_argument("--progress", action="store_true",
                        help="Show progress bars.")
    return parser

def _configure_logging(args):
    level = logging.WARNING
    if args.very_verbose:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    logging.basicConfig(format=LOG_FORMAT, level=level)

def _run_factor(args, config) -> int:
    if args.number is not None and args.bits is not None:
        print("Error: --number and --bits are mutually exclusive.", file=sys.stderr)
        return 1
    if args.number is not None:
        N = args.number
        print(f"Factoring provided number N ({N.bit_length()}-bit, {len(str(N))} digits):\n| {N}")
    elif args.bits is not None:
        N = get_composite(args.bits)
    else:
        print("Error: One of --number or --bits must be specified.", file=sys.stderr)
        return 1

    f1, f2 = factorize(N, config=config, method=args.method)
    print(f"Returned factors: {f1} * {f2}")
    return 0

def _run_dlog(args, config) -> int:
    if args.number is None or args.generator is None or args.target is None:
        print("Error: 'dlog' needs --number, --generator and --target.", file=sys.stderr)
        return 1
    x = discrete_log(args.generator, args.target, args.number, config=config, method=args.method)
    print(f"x = {x}")
    return 0

def _run_rsa(args, config) -> int:
    if args.pubkey and args.number is not None:
        print("Please provide either a public key file or a modulus, not both.", file=sys.stderr)
        return 1
    if args.pubkey:
        n = read_modulus_from_pubkey(args.pubkey)
        print(f"Read modulus N from public key: {n}")
    elif args.number is not None:
        n = args.number
        print(f"Using provided modulus: {n}")
    else:
        print("Please provide either a public key file or a modulus.", file=sys.stderr)
        return 1

    result = break_rsa(n, e=args.e, c=args.ciphertext, config=config)
    print(f"Factorization successful!\n| {n} =\n| {result.p}\n|  *\n| {result.q}")
    print(f"Private exponent d: {result.d}")
    if result.m is not None:
        print(f"Plaintext m: {result.m}")
    if args.outfile:
        with open(args.outfile, "wb") as f:
            f.write(rsa_private_key_pem(result))
        print(f"Private key written to {args.outfile}")
    return 0

def _list_methods() -> int:
    print("Factorization methods:")
    for name, cls in factorlib.METHODS.items():
        print(f" - {name}: {cls.__module__}.{cls.__name__}")
    print("Discrete logarithm methods:")
    for name, cls in dloglib.METHODS.items():
        print(f" - {name}: {cls.__module__}.{cls.__name__}")
    return 0

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.mode == "list_methods":
        return _list_methods()

    if args.mode == "gen_composite":
        if not args.bits:
            print("Error: pass --bits to use this mode!", file=sys.stderr)
            return 1
        get_composite(args.bits)
        return 0

    config = EngineConfig(progress=args.progress)
    runners = {"factor": _run_factor, "dlog": _run_dlog, "rsa": _run_rsa}
    start = time.perf_counter()
    try:
        status = runners[args.mode](args, config)
    except CryptanalysisError as e:
        logger.debug("Search failed", exc_info=True)
        print(f"ERROR: {type(e).__name__}: {e}", file=sys.stderr)
        return 2
    if args.timing:
        print(f"Time: {time.perf_counter() - start:.3f} s")
    return status

if __name__ == "__main__":
    sys.exit(main())
