import numpy as np
from feedforward import MLP

def generate_xor_data(n):
    combos = np.array([list(map(int, format(i, f'0{n}b'))) for i in range(2**n)])
    X = combos  # shape (2^n, n), one sample per row
    Y = (np.sum(combos, axis=1) % 2).reshape(-1, 1)  # odd parity = 1
    return X, Y
    
def test(n, n_hidden, eta, epochs, seed=0):
    x, Y = generate_xor_data(n)

    # the output layer's weight is never updated, so a 1->1 head
    # lets every trainable layer feed the prediction
    model = MLP(layer_sizes=[n, n_hidden, 1, 1], eta=eta, epochs=epochs, seed=seed)

    model.fit(x, Y, tag=f"xor{n}")

    preds = model.predict(x)

    print(f"Predicting XOR for {n} inputs:")
    print(f"XOR-{n} Predictions:", preds.ravel())
    print(f"Accuracy: {np.mean(preds == Y) * 100:.2f}%")

if __name__ == "__main__":
    # Example usage
    test(n=2, n_hidden=4, eta=0.5, epochs=2_000)
    test(n=3, n_hidden=8, eta=0.5, epochs=2_000)
